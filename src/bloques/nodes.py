"""Typed records surfaced by the arbiter.

All records are frozen dataclasses with slots and carry only offsets; the
text they describe lives in the buffer snapshot they were scanned from.

Node Hierarchy:
Node (base)
├── SourceBlock (fenced code, the protected construct)
└── InlineAnnotation
    ├── Header
    ├── Link
    └── Delimited
        ├── Bold
        ├── Italic
        ├── Strikethrough
        └── InlineCode

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass
from typing import ClassVar

from bloques.location import Span
from bloques.tokens import ConstructKind

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for every surfaced record.

    ``span`` is the full matched extent, markup included.

    """

    kind: ClassVar[ConstructKind]

    span: Span

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end


# =============================================================================
# Source Blocks
# =============================================================================


@dataclass(frozen=True, slots=True)
class SourceBlock(Node):
    """Fenced code block.

    Markdown:
        ```python
        print("hi")
        ```

    Offsets satisfy ``fence_start.end <= language.start <= language.end
    <= body.start <= body.end <= fence_end.start``. An untagged block still
    has an empty ``language`` span right after the opening backticks so a
    language can be typed in later.

    """

    kind: ClassVar[ConstructKind] = ConstructKind.FENCED_CODE

    fence_start: Span
    language: Span
    body: Span
    fence_end: Span

    def language_text(self, source: str) -> str | None:
        """Raw language token, or None for an untagged block."""
        if self.language.is_empty:
            return None
        return self.language.slice(source)

    def body_text(self, source: str) -> str:
        return self.body.slice(source)


# =============================================================================
# Inline Annotations
# =============================================================================


@dataclass(frozen=True, slots=True)
class InlineAnnotation(Node):
    """Base class for headers and inline constructs."""


@dataclass(frozen=True, slots=True)
class Header(InlineAnnotation):
    """ATX header.

    Markdown: ``## Title``

    ``marker`` covers the run of ``#`` characters, so its length is the level.

    """

    kind: ClassVar[ConstructKind] = ConstructKind.HEADER

    marker: Span
    title: Span

    @property
    def level(self) -> int:
        return len(self.marker)


@dataclass(frozen=True, slots=True)
class Link(InlineAnnotation):
    """Hyperlink.

    Markdown: ``[title](url)``

    """

    kind: ClassVar[ConstructKind] = ConstructKind.LINK

    title: Span
    url: Span

    def url_text(self, source: str) -> str:
        return self.url.slice(source)


@dataclass(frozen=True, slots=True)
class Delimited(InlineAnnotation):
    """Inline construct wrapping ``text`` in symmetric delimiters."""

    text: Span

    @property
    def opening(self) -> Span:
        """Span of the leading delimiter run."""
        return Span(self.span.start, self.text.start)

    @property
    def closing(self) -> Span:
        """Span of the trailing delimiter run."""
        return Span(self.text.end, self.span.end)


@dataclass(frozen=True, slots=True)
class Bold(Delimited):
    """Strong text.

    Markdown: ``**text**`` or ``__text__``

    """

    kind: ClassVar[ConstructKind] = ConstructKind.BOLD


@dataclass(frozen=True, slots=True)
class Italic(Delimited):
    """Emphasized text.

    Markdown: ``*text*`` or ``_text_``

    """

    kind: ClassVar[ConstructKind] = ConstructKind.ITALIC


@dataclass(frozen=True, slots=True)
class Strikethrough(Delimited):
    """Deleted text.

    Markdown: ``~~text~~``

    """

    kind: ClassVar[ConstructKind] = ConstructKind.STRIKETHROUGH


@dataclass(frozen=True, slots=True)
class InlineCode(Delimited):
    """Inline code span.

    Markdown: ```code```

    """

    kind: ClassVar[ConstructKind] = ConstructKind.INLINE_CODE

    @property
    def body(self) -> Span:
        return self.text


Surfaced = SourceBlock | InlineAnnotation
