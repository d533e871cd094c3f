"""Construct scanners.

One scanner per construct kind. Every scanner takes the full buffer text plus
an optional ``[start, end)`` window and lazily yields typed match records in
left-to-right, non-overlapping order for that construct alone. Overlaps
between kinds are the arbiter's concern.
"""

from collections.abc import Callable, Iterator

from bloques.config import EngineConfig
from bloques.nodes import InlineAnnotation
from bloques.scanners.fence import FenceScanner, is_language_token, scan_fenced_blocks
from bloques.scanners.heading import classify_header, scan_headers
from bloques.scanners.inline import (
    scan_bold,
    scan_inline_code,
    scan_italic,
    scan_links,
    scan_strikethrough,
)
from bloques.tokens import ConstructKind

InlineScanner = Callable[[str, int, int | None], Iterator[InlineAnnotation]]


def inline_scanners(config: EngineConfig) -> dict[ConstructKind, InlineScanner]:
    """Map every non-protected construct kind to its scanner."""

    def headers(source: str, start: int = 0, end: int | None = None) -> Iterator[InlineAnnotation]:
        return scan_headers(source, start, end, max_level=config.max_header_level)

    return {
        ConstructKind.HEADER: headers,
        ConstructKind.INLINE_CODE: scan_inline_code,
        ConstructKind.LINK: scan_links,
        ConstructKind.BOLD: scan_bold,
        ConstructKind.STRIKETHROUGH: scan_strikethrough,
        ConstructKind.ITALIC: scan_italic,
    }


__all__ = [
    "FenceScanner",
    "InlineScanner",
    "classify_header",
    "inline_scanners",
    "is_language_token",
    "scan_bold",
    "scan_fenced_blocks",
    "scan_headers",
    "scan_inline_code",
    "scan_italic",
    "scan_links",
    "scan_strikethrough",
]
