"""Overlay renderer: BlockModel -> decorations.

Maps every surfaced record onto hide/substitute/face/action decorations:

- Source block: the opening fence becomes a copy affordance bound to the
  body, the language tag is styled, the closing fence is hidden, and the
  body is colored by the highlighter (or styled as doc markup when the
  language is missing or unknown).
- Header: the ``#`` run and following spaces are hidden, the title styled
  by level.
- Link: ``[``, ``](url)`` hidden, the title styled and bound to open-url.
- Bold, italic, strikethrough, inline code: delimiters hidden, inner text
  styled.

Rendering is a pure function of the model and text; applying it to a host
always clears the region first, so re-rendering is idempotent.

Thread Safety:
    OverlayRenderer holds only immutable collaborators. Safe to share.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bloques.config import DEFAULT_CONFIG, EngineConfig
from bloques.errors import RenderError
from bloques.highlighting import Highlighter, default_highlighter
from bloques.location import Span
from bloques.nodes import (
    Bold,
    Delimited,
    Header,
    InlineAnnotation,
    InlineCode,
    Italic,
    Link,
    SourceBlock,
    Strikethrough,
)
from bloques.renderers.decorations import (
    BOLD_FACE,
    COPY_BLOCK,
    DOC_MARKUP_FACE,
    INLINE_CODE_FACE,
    ITALIC_FACE,
    LANGUAGE_FACE,
    LINK_FACE,
    OPEN_URL,
    STRIKETHROUGH_FACE,
    Decoration,
    header_face,
)
from bloques.utils.logger import get_logger

if TYPE_CHECKING:
    from bloques.actions.aliases import LanguageResolver
    from bloques.model import BlockModel
    from bloques.renderers.protocol import DisplayHost

logger = get_logger(__name__)

_DELIMITED_FACES: dict[type[Delimited], str] = {
    Bold: BOLD_FACE,
    Italic: ITALIC_FACE,
    Strikethrough: STRIKETHROUGH_FACE,
    InlineCode: INLINE_CODE_FACE,
}


class OverlayRenderer:
    """Render a BlockModel as non-destructive decorations.

    Usage:
        >>> renderer = OverlayRenderer()
        >>> host = InMemoryDisplay()
        >>> renderer.render(model, text, host)

    """

    __slots__ = ("_config", "_highlighter", "_resolver")

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        highlighter: Highlighter | None = None,
        resolver: LanguageResolver | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            config: Engine configuration (defaults if None)
            highlighter: Body highlighter (Pygments if None)
            resolver: Maps raw language tags to canonical ids before asking
                the highlighter; raw tags are tried first
        """
        self._config = config or DEFAULT_CONFIG
        self._highlighter = highlighter or default_highlighter()
        self._resolver = resolver

    def decorations(self, model: BlockModel, source: str) -> tuple[Decoration, ...]:
        """Compute the full decoration set for a model, in buffer order.

        Raises:
            RenderError: If the model was not built from ``source``.
        """
        if model.length != len(source):
            msg = f"Model covers {model.length} chars but text has {len(source)}"
            raise RenderError(msg)

        result: list[Decoration] = []
        for block in model.blocks:
            self._render_block(block, source, result)
        for annotation in model.annotations:
            self._render_annotation(annotation, source, result)

        result.sort(key=Decoration.sort_key)
        return tuple(result)

    def render(
        self,
        model: BlockModel,
        source: str,
        host: DisplayHost,
        region: Span | None = None,
        *,
        version: int | None = None,
    ) -> tuple[Decoration, ...]:
        """Clear the region on the host, then apply the model's decorations.

        Args:
            model: Model of ``source``
            source: Buffer text snapshot
            host: Display host receiving the decorations
            region: Limit to decorations inside this span (whole text if None)
            version: Buffer version ``source`` was taken at; when given, the
                model must have been built for it

        Returns:
            The decorations applied.

        Raises:
            StaleModelError: If ``version`` is given and the model predates it.
        """
        if version is not None:
            model.check_version(version)
        if region is None:
            region = Span(0, len(source))
        applied = tuple(d for d in self.decorations(model, source) if region.covers(d.span))

        host.clear_decorations(region)
        for decoration in applied:
            host.add_decoration(decoration)

        logger.debug("Rendered %d decorations over %s", len(applied), region)
        return applied

    # =========================================================================
    # Source blocks
    # =========================================================================

    def _render_block(self, block: SourceBlock, source: str, out: list[Decoration]) -> None:
        body_text = block.body_text(source)
        out.append(Decoration.substitute(block.fence_start, self._config.copy_glyph))
        out.append(Decoration.action(block.fence_start, COPY_BLOCK, body_text))
        if not block.language.is_empty:
            out.append(Decoration.styled(block.language, LANGUAGE_FACE))
        out.append(Decoration.hide(block.fence_end))

        if block.body.is_empty:
            return

        language = self._highlight_language(block.language_text(source))
        if language is None:
            out.append(Decoration.styled(block.body, DOC_MARKUP_FACE))
            return

        offset = block.body.start
        for start, end, style in self._highlighter.highlight_runs(body_text, language):
            out.append(Decoration.styled(Span(start, end).shift(offset), style))

    def _highlight_language(self, raw: str | None) -> str | None:
        """Pick the language name the highlighter understands, if any."""
        if not raw or not self._config.highlight_blocks:
            return None
        if self._highlighter.supports_language(raw):
            return raw
        if self._resolver is not None:
            canonical = self._resolver.resolve(raw)
            if canonical and self._highlighter.supports_language(canonical):
                return canonical
        return None

    # =========================================================================
    # Inline annotations
    # =========================================================================

    def _render_annotation(
        self, annotation: InlineAnnotation, source: str, out: list[Decoration]
    ) -> None:
        match annotation:
            case Header():
                out.append(Decoration.hide(Span(annotation.span.start, annotation.title.start)))
                if not annotation.title.is_empty:
                    out.append(Decoration.styled(annotation.title, header_face(annotation.level)))
            case Link():
                out.append(Decoration.hide(Span(annotation.span.start, annotation.title.start)))
                out.append(Decoration.hide(Span(annotation.title.end, annotation.span.end)))
                out.append(Decoration.styled(annotation.title, LINK_FACE))
                out.append(
                    Decoration.action(annotation.title, OPEN_URL, annotation.url_text(source))
                )
            case Delimited():
                out.append(Decoration.hide(annotation.opening))
                out.append(Decoration.hide(annotation.closing))
                out.append(Decoration.styled(annotation.text, _DELIMITED_FACES[type(annotation)]))
