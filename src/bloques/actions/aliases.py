"""Language alias resolution.

Maps the raw token typed after an opening fence to a canonical language
identifier: a static case-insensitive alias table first, then a fallback
predicate accepting any identifier the host already knows how to display
(by default, any language Pygments has a lexer for).

Example:
    >>> resolver = LanguageResolver({"elisp": "emacs-lisp"})
    >>> resolver.resolve("ELisp")
    'emacs-lisp'
"""

from collections.abc import Callable, Mapping

from bloques.config import DEFAULT_LANGUAGE_ALIASES
from bloques.highlighting import default_highlighter


class LanguageResolver:
    """Resolve raw language tokens to canonical identifiers.

    Thread Safety:
        Immutable after creation. Safe to share.
    """

    __slots__ = ("_aliases", "_fallback")

    def __init__(
        self,
        aliases: Mapping[str, str] | None = None,
        fallback: Callable[[str], bool] | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            aliases: Raw token -> canonical id (keys matched case-insensitively)
            fallback: Predicate accepting unaliased identifiers as canonical;
                defaults to "the highlighter supports it"
        """
        source = DEFAULT_LANGUAGE_ALIASES if aliases is None else aliases
        self._aliases = {key.lower(): value for key, value in source.items()}
        self._fallback = fallback or default_highlighter().supports_language

    def resolve(self, raw: str | None) -> str | None:
        """Return the canonical identifier for raw, or None if unknown."""
        if not raw:
            return None
        key = raw.strip().lower()
        if not key:
            return None
        if key in self._aliases:
            return self._aliases[key]
        if self._fallback(key):
            return key
        return None
