"""Incremental re-scanning for Bloques models.

When a response streams into the transcript, or the user edits one line,
only the text from the edited line onward needs scanning. This module
accepts a previous BlockModel plus the new text and the lowest offset
touched since that model was built, then:

1. Picks the start of the line holding the dirty offset as restart point.
2. Pulls the restart back before any surfaced record that reaches it, and
   before the first unterminated opening fence (new text may close it).
3. Keeps every record that ends before the restart point.
4. Re-scans from the restart point and merges.

Inline constructs never cross a newline and fences are paired line by line,
so a scan resumed at a line start outside every record sees exactly the
state a full scan would. The result is identical to a full ``resolve``.

Fallback:
    Invalid input (dirty offset outside the text, mismatched lengths) falls
    back to a full re-scan. This guarantees correctness at all times.

Thread Safety:
    ``rescan`` is a pure function, safe to call from any thread.

"""

from bloques.arbiter import RangeArbiter
from bloques.config import EngineConfig
from bloques.model import BlockModel
from bloques.utils.logger import get_logger

logger = get_logger(__name__)


def rescan(
    new_source: str,
    previous: BlockModel,
    dirty_from: int,
    *,
    config: EngineConfig | None = None,
    version: int | None = None,
) -> BlockModel:
    """Re-scan only the part of the text at or after the dirty line.

    Args:
        new_source: The complete new text (after all edits).
        previous: The model built before the edits.
        dirty_from: Lowest offset, in the NEW text, touched by any edit
            since ``previous`` was built. Text before it is unchanged.
        config: Engine configuration (defaults if None).
        version: Buffer version for the new model (previous + 1 if None).

    Returns:
        A model equal to a full resolve of ``new_source``. Records before
        the restart point are reused from ``previous`` (shared references).

    """
    arbiter = RangeArbiter(config)
    version = previous.version + 1 if version is None else version

    if dirty_from < 0 or dirty_from > len(new_source) or dirty_from > previous.length:
        logger.debug("Dirty offset %d out of range, full re-scan", dirty_from)
        return arbiter.resolve(new_source, version=version)

    restart = _find_restart(new_source, previous, dirty_from)

    kept_blocks = tuple(b for b in previous.blocks if b.span.end < restart)
    kept_annotations = tuple(a for a in previous.annotations if a.span.end < restart)

    logger.debug(
        "Incremental re-scan from %d (dirty %d), reusing %d blocks and %d annotations",
        restart,
        dirty_from,
        len(kept_blocks),
        len(kept_annotations),
    )

    return arbiter.resolve_from(
        new_source,
        restart,
        kept_blocks=kept_blocks,
        kept_annotations=kept_annotations,
        version=version,
    )


def _line_start(source: str, offset: int) -> int:
    return source.rfind("\n", 0, offset) + 1


def _find_restart(source: str, previous: BlockModel, dirty_from: int) -> int:
    """Find a line start before dirty_from that no previous record reaches.

    Records ending at or after the candidate restart pull it back to their
    own line start; repeated until stable.
    """
    restart = _line_start(source, dirty_from)
    if previous.unterminated_at is not None and previous.unterminated_at < restart:
        restart = previous.unterminated_at

    changed = True
    while changed:
        changed = False
        for record in previous.items():
            if record.span.start >= restart:
                break
            if record.span.end >= restart:
                restart = _line_start(source, record.span.start)
                changed = True
                break
    return restart
