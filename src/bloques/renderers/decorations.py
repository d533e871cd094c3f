"""Decoration records produced by the renderer.

A decoration is a non-destructive visual instruction over a span: hide it,
show substitute text instead, apply a named style, or bind an action.
Removing every decoration restores the original text exactly.

Thread Safety:
Decorations are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass
from enum import Enum, auto

from bloques.location import Span

# Style names. Code bodies additionally use Pygments token names.
HEADER_FACES: tuple[str, ...] = tuple(f"header-{level}" for level in range(1, 9))
LINK_FACE = "link"
BOLD_FACE = "bold"
ITALIC_FACE = "italic"
STRIKETHROUGH_FACE = "strikethrough"
INLINE_CODE_FACE = "inline-code"
DOC_MARKUP_FACE = "doc-markup"
LANGUAGE_FACE = "block-language"

# Action commands a host must understand
COPY_BLOCK = "copy-block"
OPEN_URL = "open-url"


def header_face(level: int) -> str:
    """Face for a header level. Levels outside 1-8 clamp to level 1."""
    if 1 <= level <= len(HEADER_FACES):
        return HEADER_FACES[level - 1]
    return HEADER_FACES[0]


class DecorationKind(Enum):
    """What a decoration does to its span."""

    HIDE = auto()
    SUBSTITUTE = auto()
    FACE = auto()
    ACTION = auto()


@dataclass(frozen=True, slots=True)
class ActionBinding:
    """Named command bound to a span, with its argument.

    Attributes:
        command: Command name (``copy-block``, ``open-url``)
        argument: Text the command acts on (block body, url)

    """

    command: str
    argument: str


@dataclass(frozen=True, slots=True)
class Decoration:
    """A single visual instruction.

    Attributes:
        span: Buffer span the decoration covers
        kind: What the decoration does
        text: Substitute text (SUBSTITUTE only)
        face: Style name (FACE only)
        binding: Bound action (ACTION only)

    """

    span: Span
    kind: DecorationKind
    text: str | None = None
    face: str | None = None
    binding: ActionBinding | None = None

    @classmethod
    def hide(cls, span: Span) -> "Decoration":
        return cls(span, DecorationKind.HIDE)

    @classmethod
    def substitute(cls, span: Span, text: str) -> "Decoration":
        return cls(span, DecorationKind.SUBSTITUTE, text=text)

    @classmethod
    def styled(cls, span: Span, face: str) -> "Decoration":
        return cls(span, DecorationKind.FACE, face=face)

    @classmethod
    def action(cls, span: Span, command: str, argument: str) -> "Decoration":
        return cls(span, DecorationKind.ACTION, binding=ActionBinding(command, argument))

    def sort_key(self) -> tuple[int, int, int]:
        return (self.span.start, self.span.end, self.kind.value)
