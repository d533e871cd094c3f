"""Syntax highlighting protocol and the Pygments highlighter.

The renderer delegates coloring of a block body to a highlighter, which maps
the body to ``(start, end, style)`` runs relative to the body. Runs are
turned into face decorations one to one, so every highlighted character
carries the style the highlighter chose for it.

Usage:
    from bloques.highlighting import PygmentsHighlighter

    highlighter = PygmentsHighlighter()
    highlighter.supports_language("python")  # True
    highlighter.highlight_runs("x = 1", "python")
    # [(0, 1, 'Token.Name'), (2, 3, 'Token.Operator'), (4, 5, 'Token.Literal.Number.Integer')]

    # Or bring your own
    class MyHighlighter:
        def supports_language(self, language: str) -> bool: ...
        def highlight_runs(self, code: str, language: str) -> list[tuple[int, int, str]]: ...
"""

from __future__ import annotations

from functools import lru_cache
from typing import Protocol

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import Text, Whitespace
from pygments.util import ClassNotFound

StyleRun = tuple[int, int, str]


class Highlighter(Protocol):
    """Protocol for syntax highlighters.

    Thread Safety:
        Implementations should be stateless or internally synchronized.
    """

    def supports_language(self, language: str) -> bool:
        """Check if highlighter supports the given language.

        Contract:
            - MUST NOT raise exceptions
            - SHOULD handle common aliases (js -> javascript)
        """
        ...

    def highlight_runs(self, code: str, language: str) -> list[StyleRun]:
        """Map code to style runs.

        Returns:
            ``(start, end, style)`` tuples with offsets relative to ``code``,
            ordered and non-overlapping. Unstyled text may be omitted.

        Contract:
            - MUST NOT alter offsets (no newline stripping or tab expansion)
            - SHOULD return [] for unknown languages
        """
        ...


@lru_cache(maxsize=64)
def _get_lexer(language: str) -> Lexer | None:
    """Get a Pygments lexer for a language name (cached).

    Lexers are built with newline stripping and tab expansion disabled so
    token offsets line up with the buffer text.
    """
    try:
        return get_lexer_by_name(language, stripnl=False, stripall=False, ensurenl=False)
    except ClassNotFound:
        return None


class PygmentsHighlighter:
    """Highlighter backed by Pygments lexers.

    Styles are Pygments token type names such as ``Token.Keyword``; a display
    host maps them onto its own colors.
    """

    __slots__ = ()

    def supports_language(self, language: str) -> bool:
        if not language:
            return False
        return _get_lexer(language.lower()) is not None

    def highlight_runs(self, code: str, language: str) -> list[StyleRun]:
        lexer = _get_lexer(language.lower()) if language else None
        if lexer is None:
            return []

        runs: list[StyleRun] = []
        for index, token_type, value in lexer.get_tokens_unprocessed(code):
            if not value or token_type in Text or token_type in Whitespace:
                continue
            runs.append((index, index + len(value), str(token_type)))
        return runs


_DEFAULT_HIGHLIGHTER = PygmentsHighlighter()


def default_highlighter() -> Highlighter:
    """Return the shared Pygments highlighter."""
    return _DEFAULT_HIGHLIGHTER
