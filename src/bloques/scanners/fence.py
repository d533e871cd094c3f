"""Fenced code block scanner.

Two-phase and line-based: find the next opening fence line, then find the
next closing fence line. No regex is involved, so arbitrarily long bodies
cannot trigger backtracking.

An opening fence is optional indentation, exactly three backticks, optional
blanks and an optional language token (alphanumerics, ``-``, ``+``) ending
the line. A closing fence is optional indentation and exactly three
backticks alone on their line, terminated by a newline or end of text.

"""

from collections.abc import Iterator

from bloques.location import Span
from bloques.nodes import SourceBlock

FENCE = "```"

_BLANK = " \t"
_TRAILING = " \t\r"
_LANGUAGE_PUNCT = "-+"


def _skip(source: str, pos: int, end: int, chars: str) -> int:
    while pos < end and source[pos] in chars:
        pos += 1
    return pos


def is_language_char(char: str) -> bool:
    """Check whether char may appear in a fence language token."""
    return char.isalnum() or char in _LANGUAGE_PUNCT


def is_language_token(token: str) -> bool:
    """Check whether token can follow an opening fence and keep it a fence.

    The empty token is valid and leaves the block untagged.
    """
    return all(is_language_char(char) for char in token)


def _line_end(source: str, pos: int, end: int) -> int:
    """Offset of the newline ending the line at pos, or end."""
    found = source.find("\n", pos, end)
    return end if found == -1 else found


def classify_opening_fence(source: str, line_start: int, line_end: int) -> tuple[Span, Span] | None:
    """Classify a line as an opening fence.

    Args:
        source: Full buffer text
        line_start: Offset of the first character of the line
        line_end: Offset of the line's newline (or end of text)

    Returns:
        (fence_start, language) spans, or None if the line is not an opener.
        The language span is empty when no token is present.
    """
    pos = _skip(source, line_start, line_end, _BLANK)
    if not source.startswith(FENCE, pos, line_end):
        return None
    fence_end = pos + len(FENCE)
    if fence_end < line_end and source[fence_end] == "`":
        return None

    lang_start = _skip(source, fence_end, line_end, _BLANK)
    lang_end = lang_start
    while lang_end < line_end and is_language_char(source[lang_end]):
        lang_end += 1

    if _skip(source, lang_end, line_end, _TRAILING) != line_end:
        return None

    fence = Span(pos, fence_end)
    if lang_end == lang_start:
        return fence, Span(fence_end, fence_end)
    return fence, Span(lang_start, lang_end)


def classify_closing_fence(source: str, line_start: int, line_end: int) -> Span | None:
    """Classify a line as a closing fence, returning the backtick span."""
    pos = _skip(source, line_start, line_end, _BLANK)
    if not source.startswith(FENCE, pos, line_end):
        return None
    fence_end = pos + len(FENCE)
    if _skip(source, fence_end, line_end, _TRAILING) != line_end:
        return None
    return Span(pos, fence_end)


def find_closing_fence(source: str, pos: int, end: int) -> tuple[Span, int] | None:
    """Find the first closing fence line starting at or after pos.

    pos must be a line start.

    Returns:
        (fence span, offset of the closing line's end), or None.
    """
    while pos < end:
        idx = source.find(FENCE, pos, end)
        if idx == -1:
            return None
        line_start = source.rfind("\n", 0, idx) + 1
        line_end = _line_end(source, idx, end)
        fence = classify_closing_fence(source, line_start, line_end)
        if fence is not None:
            return fence, line_end
        pos = line_end + 1
    return None


class FenceScanner:
    """Scanner yielding closed fenced code blocks in buffer order.

    Iterating restarts the scan from the configured start offset, so one
    instance can be consumed more than once. After an iteration completes,
    ``unterminated_at`` holds the line offset of the first opening fence
    that never closed (or None). Nothing after that opener can form a block,
    because any later fence line would have closed it.

    Usage:
        >>> scanner = FenceScanner("```py\\nx = 1\\n```")
        >>> [block.body for block in scanner]
        [Span(start=6, end=11)]

    Thread Safety:
        Instances hold per-iteration state. Use one per thread.

    """

    __slots__ = ("_source", "_start", "_end", "unterminated_at")

    def __init__(self, source: str, start: int = 0, end: int | None = None) -> None:
        """Initialize scanner.

        Args:
            source: Full buffer text
            start: Line-start offset where scanning begins
            end: Offset where scanning stops (defaults to end of text)
        """
        self._source = source
        self._start = start
        self._end = len(source) if end is None else end
        self.unterminated_at: int | None = None

    def __iter__(self) -> Iterator[SourceBlock]:
        source = self._source
        end = self._end
        pos = self._start
        self.unterminated_at = None

        while pos < end:
            line_end = _line_end(source, pos, end)
            opening = classify_opening_fence(source, pos, line_end)
            if opening is None:
                pos = line_end + 1
                continue

            # The opener needs its own line terminator before a body can follow
            if line_end >= end:
                self.unterminated_at = pos
                return

            body_start = line_end + 1
            closing = find_closing_fence(source, body_start, end)
            if closing is None:
                self.unterminated_at = pos
                return

            fence_start, language = opening
            fence_end, close_line_end = closing
            close_line_start = source.rfind("\n", 0, fence_end.start) + 1
            body_end = max(body_start, close_line_start - 1)
            yield SourceBlock(
                span=fence_start.span_to(fence_end),
                fence_start=fence_start,
                language=language,
                body=Span(body_start, body_end),
                fence_end=fence_end,
            )
            pos = close_line_end + 1


def scan_fenced_blocks(source: str, start: int = 0, end: int | None = None) -> Iterator[SourceBlock]:
    """Yield closed fenced code blocks left to right."""
    return iter(FenceScanner(source, start, end))
