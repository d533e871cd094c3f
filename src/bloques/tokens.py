"""Construct kinds recognised by the scanners.

Thread Safety:
ConstructKind is an enum (inherently immutable).

"""

from enum import Enum, auto


class ConstructKind(Enum):
    """Markdown constructs the transcript engine surfaces.

    Organized by category:
    - Protected block construct (fenced code)
    - Line structure (ATX headers)
    - Inline constructs

    """

    # Protected block construct
    FENCED_CODE = auto()  # ```lang ... ```

    # Line structure
    HEADER = auto()  # ## Title

    # Inline constructs
    INLINE_CODE = auto()  # `code`
    LINK = auto()  # [title](url)
    BOLD = auto()  # **text** or __text__
    STRIKETHROUGH = auto()  # ~~text~~
    ITALIC = auto()  # *text* or _text_


# Acceptance order used by the arbiter: first accepted wins on overlap.
# Fenced code bodies are protected and always go first; inline code outranks
# every emphasis form so a backtick span is never reread as emphasis.
ARBITRATION_ORDER: tuple[ConstructKind, ...] = (
    ConstructKind.FENCED_CODE,
    ConstructKind.HEADER,
    ConstructKind.INLINE_CODE,
    ConstructKind.LINK,
    ConstructKind.BOLD,
    ConstructKind.STRIKETHROUGH,
    ConstructKind.ITALIC,
)
