"""Inline construct scanners.

Each scanner performs classic greedy left-to-right tokenization for its own
construct: take the leftmost match, resume right after its end, never
backtrack. Inline constructs never cross a newline, which keeps every line
independent of the lines around it.

Constructs:
    - Inline code: `` `text` ``
    - Link: ``[title](url)``
    - Bold: ``**text**`` / ``__text__``
    - Strikethrough: ``~~text~~``
    - Italic: ``*text*`` / ``_text_``, opener preceded by start, newline or
      whitespace so the middle of a bold run never opens one

In every case the enclosed text is non-empty and excludes the delimiter
character.

"""

from collections.abc import Iterator

from bloques.location import Span
from bloques.nodes import Bold, Delimited, InlineCode, Italic, Link, Strikethrough


class _NextIndex:
    """Memoized ``source.find(needle, pos, end)``.

    Remembers the last answer: when the first hit at or after ``origin`` is
    ``found``, it is also the first hit for any pos in ``[origin, found]``.
    Scanners query with mostly increasing positions, so each needle is
    searched across the text about once instead of once per failed opener.
    """

    __slots__ = ("_end", "_found", "_needle", "_origin", "_source")

    def __init__(self, source: str, needle: str, end: int) -> None:
        self._source = source
        self._needle = needle
        self._end = end
        self._origin = end + 1
        self._found = -1

    def __call__(self, pos: int) -> int:
        if self._origin <= pos and (self._found == -1 or pos <= self._found):
            return self._found
        self._origin = pos
        self._found = self._source.find(self._needle, pos, self._end)
        return self._found


def _find_either(char: _NextIndex, newline: _NextIndex, pos: int) -> int:
    """First offset of the closing char or a newline at or after pos, or -1."""
    hit = char(pos)
    stop = newline(pos)
    if hit == -1:
        return stop
    if stop == -1:
        return hit
    return min(hit, stop)


def _match_delimited(
    source: str,
    pos: int,
    end: int,
    delimiter: str,
    node_type: type[Delimited],
    closers: _NextIndex,
    newline: _NextIndex,
) -> Delimited | None:
    """Match ``delimiter text delimiter`` starting exactly at pos."""
    text_start = pos + len(delimiter)
    close = _find_either(closers, newline, text_start)
    if close == -1 or close == text_start or source[close] != delimiter[0]:
        return None
    if not source.startswith(delimiter, close, end):
        return None
    return node_type(span=Span(pos, close + len(delimiter)), text=Span(text_start, close))


def _scan_delimited(
    source: str,
    start: int,
    end: int | None,
    delimiters: tuple[str, ...],
    node_type: type[Delimited],
    *,
    boundary: bool = False,
) -> Iterator[Delimited]:
    end = len(source) if end is None else end
    openers = [_NextIndex(source, d, end) for d in delimiters]
    closers = {d[0]: _NextIndex(source, d[0], end) for d in delimiters}
    newline = _NextIndex(source, "\n", end)
    pos = start
    while pos < end:
        # Leftmost occurrence of any opening delimiter
        candidates = [i for i in (find(pos) for find in openers) if i != -1]
        if not candidates:
            return
        idx = min(candidates)

        if boundary and idx > 0 and not source[idx - 1].isspace():
            pos = idx + 1
            continue

        match = None
        for delimiter in delimiters:
            if source.startswith(delimiter, idx, end):
                match = _match_delimited(
                    source, idx, end, delimiter, node_type, closers[delimiter[0]], newline
                )
                if match is not None:
                    break

        if match is None:
            pos = idx + 1
            continue

        yield match
        pos = match.span.end


def scan_inline_code(source: str, start: int = 0, end: int | None = None) -> Iterator[Delimited]:
    """Yield `` `code` `` spans."""
    return _scan_delimited(source, start, end, ("`",), InlineCode)


def scan_bold(source: str, start: int = 0, end: int | None = None) -> Iterator[Delimited]:
    """Yield ``**bold**`` and ``__bold__`` runs."""
    return _scan_delimited(source, start, end, ("**", "__"), Bold)


def scan_strikethrough(source: str, start: int = 0, end: int | None = None) -> Iterator[Delimited]:
    """Yield ``~~struck~~`` runs."""
    return _scan_delimited(source, start, end, ("~~",), Strikethrough)


def scan_italic(source: str, start: int = 0, end: int | None = None) -> Iterator[Delimited]:
    """Yield ``*italic*`` and ``_italic_`` runs."""
    return _scan_delimited(source, start, end, ("*", "_"), Italic, boundary=True)


def scan_links(source: str, start: int = 0, end: int | None = None) -> Iterator[Link]:
    """Yield ``[title](url)`` links.

    The title excludes ``]``, the url excludes ``)``; neither may be empty.
    """
    end = len(source) if end is None else end
    openers = _NextIndex(source, "[", end)
    title_closers = _NextIndex(source, "]", end)
    url_closers = _NextIndex(source, ")", end)
    newline = _NextIndex(source, "\n", end)
    pos = start
    while pos < end:
        idx = openers(pos)
        if idx == -1:
            return

        title_end = _find_either(title_closers, newline, idx + 1)
        if (
            title_end == -1
            or title_end == idx + 1
            or source[title_end] != "]"
            or not source.startswith("(", title_end + 1, end)
        ):
            pos = idx + 1
            continue

        url_start = title_end + 2
        url_end = _find_either(url_closers, newline, url_start)
        if url_end == -1 or url_end == url_start or source[url_end] != ")":
            pos = idx + 1
            continue

        yield Link(
            span=Span(idx, url_end + 1),
            title=Span(idx + 1, title_end),
            url=Span(url_start, url_end),
        )
        pos = url_end + 1
