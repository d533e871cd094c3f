"""Tests for bloques.arbiter: resolving scanner output into a disjoint model."""

from hypothesis import given, settings
from hypothesis import strategies as st

from bloques import resolve
from bloques.arbiter import RangeArbiter, SpanSet
from bloques.config import EngineConfig
from bloques.location import Span
from bloques.nodes import Bold, Header, InlineCode, Italic, Link, Strikethrough
from bloques.tokens import ConstructKind

# Fragments that exercise every construct and their overlaps
fragments = st.sampled_from(
    [
        "```",
        "```py",
        "\n",
        "`",
        "*",
        "**",
        "_",
        "__",
        "~~",
        "# ",
        "## ",
        "[",
        "]",
        "(",
        ")",
        "a",
        "b",
        " ",
        "x y",
    ]
)
transcripts = st.lists(fragments, max_size=40).map("".join)


# ---------------------------------------------------------------------------
# SpanSet
# ---------------------------------------------------------------------------


class TestSpanSet:
    def test_empty(self) -> None:
        assert not SpanSet().intersects(Span(0, 5))

    def test_intersects_neighbours(self) -> None:
        spans = SpanSet([Span(2, 4), Span(10, 12)])
        assert spans.intersects(Span(3, 5))
        assert spans.intersects(Span(0, 11))
        assert spans.intersects(Span(11, 20))
        assert not spans.intersects(Span(4, 10))
        assert not spans.intersects(Span(0, 2))
        assert len(spans) == 2

    def test_unsorted_initial_spans(self) -> None:
        spans = SpanSet([Span(10, 12), Span(2, 4)])
        assert spans.intersects(Span(3, 4))
        assert not spans.intersects(Span(5, 9))

    def test_update_merges_sorted_batch(self) -> None:
        spans = SpanSet([Span(2, 4), Span(10, 12)])
        spans.update([Span(0, 1), Span(5, 8), Span(20, 22)])
        assert len(spans) == 5
        assert spans.intersects(Span(6, 7))
        assert spans.intersects(Span(21, 30))
        assert not spans.intersects(Span(8, 10))
        assert not spans.intersects(Span(12, 20))


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_single_python_block(self) -> None:
        source = "```python\ndef f():\n  return 1\n```"
        model = resolve(source)
        assert len(model.blocks) == 1
        block = model.blocks[0]
        assert block.language_text(source) == "python"
        assert block.body_text(source) == "def f():\n  return 1"
        assert model.annotations == ()

    def test_four_inline_constructs_in_order(self) -> None:
        source = "**bold** and *italic* and ~~gone~~ and `code`"
        model = resolve(source)
        kinds = [type(a) for a in model.annotations]
        texts = [a.text.slice(source) for a in model.annotations]
        assert kinds == [Bold, Italic, Strikethrough, InlineCode]
        assert texts == ["bold", "italic", "gone", "code"]

    def test_emphasis_inside_inline_code(self) -> None:
        source = "`*not italic*`"
        model = resolve(source)
        assert len(model.annotations_of(ConstructKind.INLINE_CODE)) == 1
        assert model.annotations_of(ConstructKind.ITALIC) == ()

    def test_inline_code_beats_valid_italic(self) -> None:
        source = "` *x* `"
        model = resolve(source)
        assert [type(a) for a in model.annotations] == [InlineCode]

    def test_unterminated_fence(self) -> None:
        model = resolve("```js\nconsole.log(1)")
        assert model.blocks == ()
        assert model.unterminated_at == 0


# ---------------------------------------------------------------------------
# Arbitration order
# ---------------------------------------------------------------------------


class TestArbitration:
    def test_block_extent_is_protected(self) -> None:
        model = resolve("```\n**bold** `x` [t](u)\n# not a header\n```")
        assert len(model.blocks) == 1
        assert model.annotations == ()

    def test_language_line_is_protected(self) -> None:
        model = resolve("```c++\nx\n```")
        assert model.annotations == ()

    def test_header_beats_bold(self) -> None:
        model = resolve("# **Title**")
        assert [type(a) for a in model.annotations] == [Header]

    def test_inline_code_beats_link(self) -> None:
        model = resolve("`[a](b)`")
        assert [type(a) for a in model.annotations] == [InlineCode]

    def test_link_beats_bold(self) -> None:
        model = resolve("[**x**](u)")
        assert [type(a) for a in model.annotations] == [Link]

    def test_bold_beats_overlapping_italic(self) -> None:
        source = "*a **b** c*"
        model = resolve(source)
        assert [type(a) for a in model.annotations] == [Bold]
        assert model.annotations[0].text.slice(source) == "b"

    def test_annotations_outside_blocks_survive(self) -> None:
        source = "**before**\n```\ncode\n```\n*after*"
        model = resolve(source)
        assert [type(a) for a in model.annotations] == [Bold, Italic]

    def test_max_header_level_from_config(self) -> None:
        model = RangeArbiter(EngineConfig(max_header_level=2)).resolve("### deep\n## ok")
        assert [h.level for h in model.annotations_of(ConstructKind.HEADER)] == [2]

    def test_version_and_length_recorded(self) -> None:
        model = resolve("# a", version=7)
        assert model.version == 7
        assert model.length == 3


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestArbiterProperties:
    @given(source=transcripts)
    @settings(max_examples=200)
    def test_surfaced_ranges_never_overlap(self, source: str) -> None:
        model = resolve(source)
        items = list(model.items())
        for before, after in zip(items, items[1:], strict=False):
            assert before.span.end <= after.span.start

    @given(source=transcripts)
    @settings(max_examples=200)
    def test_no_annotation_inside_a_block(self, source: str) -> None:
        model = resolve(source)
        for block in model.blocks:
            for annotation in model.annotations:
                assert not annotation.span.intersects(block.body)
                assert not annotation.span.intersects(block.span)

    @given(source=transcripts)
    @settings(max_examples=200)
    def test_resolution_is_deterministic(self, source: str) -> None:
        assert resolve(source) == resolve(source)

    @given(source=transcripts)
    @settings(max_examples=200)
    def test_annotations_are_line_confined(self, source: str) -> None:
        model = resolve(source)
        for annotation in model.annotations:
            assert "\n" not in annotation.span.slice(source)

    @given(source=transcripts)
    @settings(max_examples=100)
    def test_items_sorted_by_start(self, source: str) -> None:
        starts = [item.span.start for item in resolve(source).items()]
        assert starts == sorted(starts)
