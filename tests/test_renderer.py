"""Tests for the overlay renderer and the in-memory display host."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from bloques import LanguageResolver, resolve
from bloques.config import EngineConfig
from bloques.errors import RenderError, StaleModelError
from bloques.location import Span
from bloques.renderers import (
    ActionBinding,
    Decoration,
    DecorationKind,
    InMemoryDisplay,
    OverlayRenderer,
    header_face,
)
from bloques.renderers.decorations import COPY_BLOCK, DOC_MARKUP_FACE, LANGUAGE_FACE, OPEN_URL

fragments = st.sampled_from(
    ["```", "```python", "\n", "`", "*", "**", "_", "~~", "# ", "[t](u)", "x = 1", " "]
)
transcripts = st.lists(fragments, max_size=30).map("".join)

BLOCK_SOURCE = "```python\ndef f():\n  return 1\n```"


def _decorations(source: str, config: EngineConfig | None = None) -> tuple[Decoration, ...]:
    return OverlayRenderer(config).decorations(resolve(source), source)


def _of_kind(decorations: tuple[Decoration, ...], kind: DecorationKind) -> list[Decoration]:
    return [d for d in decorations if d.kind is kind]


# ---------------------------------------------------------------------------
# Source blocks
# ---------------------------------------------------------------------------


class TestBlockDecorations:
    def test_opening_fence_becomes_copy_affordance(self) -> None:
        decorations = _decorations(BLOCK_SOURCE)
        [substitute] = _of_kind(decorations, DecorationKind.SUBSTITUTE)
        assert substitute.span == Span(0, 3)
        assert substitute.text == "⧉ "
        [action] = _of_kind(decorations, DecorationKind.ACTION)
        assert action.binding == ActionBinding(COPY_BLOCK, "def f():\n  return 1")

    def test_closing_fence_hidden(self) -> None:
        [hide] = _of_kind(_decorations(BLOCK_SOURCE), DecorationKind.HIDE)
        assert hide.span == Span(30, 33)

    def test_language_styled(self) -> None:
        faces = _of_kind(_decorations(BLOCK_SOURCE), DecorationKind.FACE)
        assert Decoration.styled(Span(3, 9), LANGUAGE_FACE) in faces

    def test_body_highlighted_by_token(self) -> None:
        faces = _of_kind(_decorations(BLOCK_SOURCE), DecorationKind.FACE)
        body_faces = [d for d in faces if Span(10, 29).covers(d.span)]
        assert body_faces
        assert all(d.face.startswith("Token.") for d in body_faces)
        assert Decoration.styled(Span(10, 13), "Token.Keyword") in body_faces

    def test_untagged_body_is_doc_markup(self) -> None:
        faces = _of_kind(_decorations("```\nx\n```"), DecorationKind.FACE)
        assert faces == [Decoration.styled(Span(4, 5), DOC_MARKUP_FACE)]

    def test_unknown_language_is_doc_markup(self) -> None:
        source = "```nosuchlang\nx\n```"
        faces = _of_kind(_decorations(source), DecorationKind.FACE)
        assert Decoration.styled(Span(14, 15), DOC_MARKUP_FACE) in faces

    def test_aliased_language_resolved_for_highlighting(self) -> None:
        source = "```python3-ish\nx = 1\n```"
        resolver = LanguageResolver({"python3-ish": "python"})
        renderer = OverlayRenderer(resolver=resolver)
        faces = _of_kind(renderer.decorations(resolve(source), source), DecorationKind.FACE)
        assert any(d.face.startswith("Token.") for d in faces if d.face)

    def test_highlighting_disabled(self) -> None:
        config = EngineConfig(highlight_blocks=False)
        faces = _of_kind(_decorations(BLOCK_SOURCE, config), DecorationKind.FACE)
        assert Decoration.styled(Span(10, 29), DOC_MARKUP_FACE) in faces

    def test_empty_body_gets_no_face(self) -> None:
        faces = _of_kind(_decorations("```python\n```"), DecorationKind.FACE)
        assert faces == [Decoration.styled(Span(3, 9), LANGUAGE_FACE)]

    def test_custom_copy_glyph(self) -> None:
        config = EngineConfig(copy_glyph="[copy] ")
        [substitute] = _of_kind(_decorations(BLOCK_SOURCE, config), DecorationKind.SUBSTITUTE)
        assert substitute.text == "[copy] "


# ---------------------------------------------------------------------------
# Inline annotations
# ---------------------------------------------------------------------------


class TestInlineDecorations:
    def test_bold(self) -> None:
        assert _decorations("**hi**") == (
            Decoration.hide(Span(0, 2)),
            Decoration.styled(Span(2, 4), "bold"),
            Decoration.hide(Span(4, 6)),
        )

    def test_italic_strike_and_code_faces(self) -> None:
        faces = [d.face for d in _of_kind(_decorations("*a* ~~b~~ `c`"), DecorationKind.FACE)]
        assert faces == ["italic", "strikethrough", "inline-code"]

    def test_header(self) -> None:
        assert _decorations("## Sub") == (
            Decoration.hide(Span(0, 3)),
            Decoration.styled(Span(3, 6), "header-2"),
        )

    def test_link(self) -> None:
        source = "[t](http://x)"
        decorations = _decorations(source)
        assert Decoration.hide(Span(0, 1)) in decorations
        assert Decoration.hide(Span(2, 13)) in decorations
        assert Decoration.styled(Span(1, 2), "link") in decorations
        assert Decoration.action(Span(1, 2), OPEN_URL, "http://x") in decorations


class TestHeaderFace:
    @pytest.mark.parametrize("level", range(1, 9))
    def test_distinct_levels(self, level: int) -> None:
        assert header_face(level) == f"header-{level}"

    @pytest.mark.parametrize("level", [0, 9, 12])
    def test_out_of_range_clamps_to_level_one(self, level: int) -> None:
        assert header_face(level) == "header-1"


# ---------------------------------------------------------------------------
# Applying to a host
# ---------------------------------------------------------------------------


class TestRender:
    def test_render_applies_decorations(self) -> None:
        source = "**hi**"
        host = InMemoryDisplay()
        applied = OverlayRenderer().render(resolve(source), source, host)
        assert host.decorations == applied
        assert host.clear_count == 1

    def test_rerender_is_idempotent(self) -> None:
        source = BLOCK_SOURCE + "\n**b** [l](u)"
        model = resolve(source)
        renderer = OverlayRenderer()
        host = InMemoryDisplay()
        renderer.render(model, source, host)
        first = host.decorations
        renderer.render(model, source, host)
        assert host.decorations == first

    def test_region_render_keeps_outside_decorations(self) -> None:
        source = "**a**\n**b**"
        model = resolve(source)
        renderer = OverlayRenderer()
        host = InMemoryDisplay()
        renderer.render(model, source, host)
        applied = renderer.render(model, source, host, region=Span(6, 11))
        assert len(applied) == 3
        assert len(host) == 6

    def test_mismatched_model_rejected(self) -> None:
        with pytest.raises(RenderError):
            OverlayRenderer().decorations(resolve("abc"), "abcd")

    def test_stale_version_rejected(self) -> None:
        host = InMemoryDisplay()
        with pytest.raises(StaleModelError):
            OverlayRenderer().render(resolve("**a**", version=3), "**a**", host, version=4)
        assert len(host) == 0

    def test_matching_version_renders(self) -> None:
        host = InMemoryDisplay()
        OverlayRenderer().render(resolve("**a**", version=3), "**a**", host, version=3)
        assert len(host) == 3

    def test_faces_and_actions_at(self) -> None:
        source = "[t](u)"
        host = InMemoryDisplay()
        OverlayRenderer().render(resolve(source), source, host)
        assert host.faces_at(1) == ["link"]
        assert host.actions_at(1) == [ActionBinding(OPEN_URL, "u")]
        assert host.faces_at(0) == []


class TestVisibleText:
    def test_inline_markup_hidden(self) -> None:
        source = "**bold** and *italic* and ~~gone~~ and `code`"
        host = InMemoryDisplay()
        OverlayRenderer().render(resolve(source), source, host)
        assert host.visible_text(source) == "bold and italic and gone and code"

    def test_block_shows_glyph_language_and_body(self) -> None:
        host = InMemoryDisplay()
        OverlayRenderer().render(resolve(BLOCK_SOURCE), BLOCK_SOURCE, host)
        assert host.visible_text(BLOCK_SOURCE) == "⧉ python\ndef f():\n  return 1\n"

    def test_header_and_link(self) -> None:
        source = "# Title\nsee [docs](http://d)"
        host = InMemoryDisplay()
        OverlayRenderer().render(resolve(source), source, host)
        assert host.visible_text(source) == "Title\nsee docs"

    def test_clearing_restores_original_text(self) -> None:
        source = "# T\n**b**"
        host = InMemoryDisplay()
        OverlayRenderer().render(resolve(source), source, host)
        host.clear_decorations(Span(0, len(source)))
        assert host.visible_text(source) == source


class TestRendererProperties:
    @given(source=transcripts)
    @settings(max_examples=100)
    def test_render_clear_render_is_idempotent(self, source: str) -> None:
        model = resolve(source)
        renderer = OverlayRenderer()
        once = InMemoryDisplay()
        renderer.render(model, source, once)
        twice = InMemoryDisplay()
        renderer.render(model, source, twice)
        renderer.render(model, source, twice)
        assert once.decorations == twice.decorations

    @given(source=transcripts)
    @settings(max_examples=100)
    def test_decorations_stay_inside_text(self, source: str) -> None:
        for decoration in _decorations(source):
            assert decoration.span.end <= len(source)
