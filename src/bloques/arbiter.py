"""Range arbiter: turns independent scanner output into a disjoint BlockModel.

Procedure:
1. Scan fenced code blocks. Their extents form the protected set.
2. Scan every other construct kind against the same text.
3. Walk the kinds in ``ARBITRATION_ORDER`` and accept a candidate only if it
   touches neither a protected extent nor an already accepted candidate.
4. Order the accepted annotations by start offset.

No surfaced range overlaps another, and no annotation ever points inside a
code body.

Thread Safety:
RangeArbiter holds only immutable configuration. ``resolve`` is a pure
function of its inputs and safe to call from any thread.

"""

import heapq
from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import replace

from bloques.cache import ModelCache, hash_config, hash_content
from bloques.config import DEFAULT_CONFIG, EngineConfig
from bloques.location import Span
from bloques.model import BlockModel
from bloques.nodes import InlineAnnotation, SourceBlock
from bloques.scanners import FenceScanner, InlineScanner, inline_scanners
from bloques.tokens import ARBITRATION_ORDER, ConstructKind
from bloques.utils.logger import get_logger

logger = get_logger(__name__)


class SpanSet:
    """Sorted set of pairwise-disjoint spans with O(log n) overlap checks."""

    __slots__ = ("_starts", "_ends")

    def __init__(self, spans: Iterable[Span] = ()) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []
        self.update(sorted(spans, key=lambda s: s.start))

    def __len__(self) -> int:
        return len(self._starts)

    def intersects(self, span: Span) -> bool:
        """Check whether span shares a character with any member."""
        i = bisect_right(self._starts, span.start)
        if i > 0 and self._ends[i - 1] > span.start:
            return True
        return i < len(self._starts) and self._starts[i] < span.end

    def update(self, spans: Iterable[Span]) -> None:
        """Merge a batch of spans sorted by start.

        One linear merge per batch, so adding every match of a construct
        kind costs O(n) rather than one list insertion per span.
        """
        pairs = list(heapq.merge(zip(self._starts, self._ends), ((s.start, s.end) for s in spans)))
        self._starts = [start for start, _ in pairs]
        self._ends = [end for _, end in pairs]


class RangeArbiter:
    """Resolve overlapping candidate matches into a BlockModel.

    Usage:
        >>> arbiter = RangeArbiter()
        >>> model = arbiter.resolve("**bold** and `code`")
        >>> [a.kind.name for a in model.annotations]
        ['BOLD', 'INLINE_CODE']

    """

    __slots__ = ("_config", "_scanners")

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._scanners: dict[ConstructKind, InlineScanner] = inline_scanners(self._config)

    @property
    def config(self) -> EngineConfig:
        return self._config

    def resolve(self, source: str, *, version: int = 0) -> BlockModel:
        """Scan and arbitrate the whole text."""
        return self.resolve_from(source, 0, version=version)

    def resolve_from(
        self,
        source: str,
        start: int,
        *,
        kept_blocks: tuple[SourceBlock, ...] = (),
        kept_annotations: tuple[InlineAnnotation, ...] = (),
        version: int = 0,
    ) -> BlockModel:
        """Scan text from the line start ``start`` and merge with kept records.

        Kept records must all end before ``start`` and come from a scan of
        identical text up to that point; the incremental re-scan relies on
        this to reuse the unchanged prefix.

        Args:
            source: Full buffer text
            start: Line-start offset where scanning resumes
            kept_blocks: Blocks reused from a previous model
            kept_annotations: Annotations reused from a previous model
            version: Buffer version the model will describe

        Returns:
            BlockModel for the whole text
        """
        fences = FenceScanner(source, start)
        blocks = tuple(fences)

        occupied = SpanSet(block.span for block in blocks)
        accepted: list[InlineAnnotation] = []
        discarded = 0

        for kind in ARBITRATION_ORDER:
            if kind is ConstructKind.FENCED_CODE:
                continue
            # Matches of one kind never overlap each other, so only earlier
            # kinds and blocks are checked and the batch is merged afterwards.
            batch: list[InlineAnnotation] = []
            for candidate in self._scanners[kind](source, start, None):
                if occupied.intersects(candidate.span):
                    discarded += 1
                    continue
                batch.append(candidate)
            occupied.update(a.span for a in batch)
            accepted.extend(batch)

        accepted.sort(key=lambda a: (a.span.start, a.span.end))

        logger.debug(
            "Resolved %d chars from %d: %d blocks, %d annotations, %d discarded",
            len(source),
            start,
            len(blocks),
            len(accepted),
            discarded,
        )

        return BlockModel(
            blocks=(*kept_blocks, *blocks),
            annotations=(*kept_annotations, *accepted),
            length=len(source),
            version=version,
            unterminated_at=fences.unterminated_at,
        )


def resolve(
    source: str,
    *,
    config: EngineConfig | None = None,
    version: int = 0,
    cache: ModelCache | None = None,
) -> BlockModel:
    """Resolve buffer text into a BlockModel.

    Args:
        source: Buffer text snapshot
        config: Engine configuration (defaults if None)
        version: Buffer version the model will describe
        cache: Optional content-addressed model cache. On a hit the cached
            model is returned re-stamped with ``version``.

    Returns:
        BlockModel of the text

    Example:
        >>> model = resolve("```python\\nprint(1)\\n```")
        >>> len(model.blocks)
        1
    """
    config = config or DEFAULT_CONFIG

    if cache is not None:
        content_hash = hash_content(source)
        config_hash = hash_config(config)
        cached = cache.get(content_hash, config_hash)
        if cached is not None:
            return cached if cached.version == version else replace(cached, version=version)

    model = RangeArbiter(config).resolve(source, version=version)

    if cache is not None:
        cache.put(content_hash, config_hash, model)

    return model
