"""Block model: the resolved, queryable view of one buffer snapshot.

The model owns no text. It holds offsets into the snapshot it was scanned
from and must be discarded once the buffer mutates; ``version`` records
which buffer version it describes.

Thread Safety:
BlockModel is frozen (immutable) and safe to share across threads.

"""

from bisect import bisect_left, bisect_right
from collections.abc import Iterator
from dataclasses import dataclass

from bloques.errors import StaleModelError
from bloques.nodes import InlineAnnotation, SourceBlock, Surfaced
from bloques.tokens import ConstructKind


@dataclass(frozen=True, slots=True)
class BlockModel:
    """Non-overlapping source blocks and inline annotations in buffer order.

    Attributes:
        blocks: Source blocks ordered by start offset
        annotations: Inline annotations ordered by start offset, each disjoint
            from every block and from each other
        length: Length of the text the model was built from
        version: Buffer version the model describes
        unterminated_at: Line offset of the first opening fence that never
            closed, if any

    """

    blocks: tuple[SourceBlock, ...] = ()
    annotations: tuple[InlineAnnotation, ...] = ()
    length: int = 0
    version: int = 0
    unterminated_at: int | None = None

    def __len__(self) -> int:
        return len(self.blocks) + len(self.annotations)

    def items(self) -> Iterator[Surfaced]:
        """All surfaced records merged in buffer order."""
        blocks, annotations = self.blocks, self.annotations
        i = j = 0
        while i < len(blocks) and j < len(annotations):
            if blocks[i].span.start <= annotations[j].span.start:
                yield blocks[i]
                i += 1
            else:
                yield annotations[j]
                j += 1
        yield from blocks[i:]
        yield from annotations[j:]

    def annotations_of(self, kind: ConstructKind) -> tuple[InlineAnnotation, ...]:
        """Annotations of one construct kind, in buffer order."""
        return tuple(a for a in self.annotations if a.kind is kind)

    def check_version(self, version: int) -> None:
        """Raise StaleModelError unless the model describes ``version``."""
        if version != self.version:
            raise StaleModelError(self.version, version)

    # =========================================================================
    # Queries
    # =========================================================================

    def block_at(self, point: int) -> SourceBlock | None:
        """Return the block whose opening-to-closing fence extent holds point.

        The end of the closing fence still counts as inside the block.
        """
        i = bisect_right(self.blocks, point, key=lambda b: b.span.start) - 1
        if i >= 0 and point <= self.blocks[i].span.end:
            return self.blocks[i]
        return None

    def next_block(self, point: int) -> SourceBlock | None:
        """Nearest block whose body starts strictly after point."""
        i = bisect_right(self.blocks, point, key=lambda b: b.body.start)
        return self.blocks[i] if i < len(self.blocks) else None

    def previous_block(self, point: int) -> SourceBlock | None:
        """Nearest block whose body starts strictly before point."""
        i = bisect_left(self.blocks, point, key=lambda b: b.body.start) - 1
        return self.blocks[i] if i >= 0 else None

    def annotation_at(self, point: int) -> InlineAnnotation | None:
        """Return the annotation whose span holds point."""
        i = bisect_right(self.annotations, point, key=lambda a: a.span.start) - 1
        if i >= 0 and self.annotations[i].span.contains(point):
            return self.annotations[i]
        return None
