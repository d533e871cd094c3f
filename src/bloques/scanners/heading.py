"""ATX header scanner.

A header line starts with 1 to ``max_level`` ``#`` characters followed by
one or more spaces; the rest of the line is the title.
"""

from collections.abc import Iterator

from bloques.location import Span
from bloques.nodes import Header


def classify_header(
    source: str, line_start: int, line_end: int, max_level: int = 8
) -> Header | None:
    """Try to classify a line as an ATX header.

    Args:
        source: Full buffer text
        line_start: Offset of the first character of the line
        line_end: Offset of the line's newline (or end of text)
        max_level: Deepest accepted header level

    Returns:
        Header if the line qualifies, None otherwise.
    """
    pos = line_start
    while pos < line_end and source[pos] == "#":
        pos += 1

    level = pos - line_start
    if level == 0 or level > max_level:
        return None

    title_start = pos
    while title_start < line_end and source[title_start] == " ":
        title_start += 1
    if title_start == pos:
        return None

    title_end = line_end
    if title_end > title_start and source[title_end - 1] == "\r":
        title_end -= 1

    return Header(
        span=Span(line_start, title_end),
        marker=Span(line_start, pos),
        title=Span(title_start, title_end),
    )


def scan_headers(
    source: str, start: int = 0, end: int | None = None, *, max_level: int = 8
) -> Iterator[Header]:
    """Yield ATX headers left to right.

    Scanning is line-anchored: when start is not a line start, the partial
    line is skipped.
    """
    end = len(source) if end is None else end
    pos = start
    if pos > 0 and source[pos - 1] != "\n":
        found = source.find("\n", pos, end)
        pos = end if found == -1 else found + 1

    while pos < end:
        found = source.find("\n", pos, end)
        line_end = end if found == -1 else found
        if source.startswith("#", pos):
            header = classify_header(source, pos, line_end, max_level)
            if header is not None:
                yield header
        pos = line_end + 1
