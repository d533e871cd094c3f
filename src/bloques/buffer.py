"""Transcript buffer: the text the engine scans.

The transport collaborator streams response text in with ``append`` and
marks scan-safe points with ``finish``; the user edits with ``replace``.
Every mutation bumps ``version`` and lowers the dirty offset, the lowest
position touched since the last checkpoint. A checkpoint hands the scanner
one consistent snapshot together with that offset, so the incremental
re-scan knows where unchanged text ends.

``kill`` marks the buffer dead. Completion callbacks of detached actions
check ``alive`` before touching anything that belongs to the buffer.

Thread Safety:
    Mutations and snapshots are serialized by an internal lock, so a scan
    never observes a buffer mid-mutation.

"""

import threading
from dataclasses import dataclass

from bloques.errors import BufferClosedError
from bloques.location import Span


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Consistent view of the buffer at one version.

    Attributes:
        text: Full buffer text
        version: Mutation counter value
        dirty_from: Lowest offset touched since the previous checkpoint,
            None if nothing changed (only set by ``checkpoint``)

    """

    text: str
    version: int
    dirty_from: int | None = None


class TranscriptBuffer:
    """Mutable transcript text with version and dirty tracking."""

    __slots__ = ("_text", "_version", "_dirty_from", "_alive", "_finished", "_lock")

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._version = 0
        self._dirty_from: int | None = None
        self._alive = True
        self._finished = True
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def version(self) -> int:
        return self._version

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def finished(self) -> bool:
        """False while a response is still streaming in."""
        return self._finished

    @property
    def dirty_from(self) -> int | None:
        return self._dirty_from

    # =========================================================================
    # Mutation
    # =========================================================================

    def append(self, chunk: str) -> int:
        """Append a streamed chunk. Returns the new version."""
        with self._lock:
            self._check_alive()
            self._finished = False
            if not chunk:
                return self._version
            self._touch(len(self._text))
            self._text += chunk
            return self._version

    def finish(self) -> None:
        """Mark a scan-safe completion point (end of a streamed response)."""
        with self._lock:
            self._check_alive()
            self._finished = True

    def replace(self, span: Span, text: str) -> int:
        """Replace the text covered by span. Returns the new version.

        Raises:
            ValueError: If span extends past the end of the buffer
        """
        with self._lock:
            self._check_alive()
            if span.end > len(self._text):
                msg = f"Span {span} outside buffer of length {len(self._text)}"
                raise ValueError(msg)
            if span.is_empty and not text:
                return self._version
            self._touch(span.start)
            self._text = self._text[: span.start] + text + self._text[span.end :]
            return self._version

    def insert(self, offset: int, text: str) -> int:
        return self.replace(Span(offset, offset), text)

    def delete(self, span: Span) -> int:
        return self.replace(span, "")

    def kill(self) -> None:
        """Mark the buffer dead. Later mutations raise BufferClosedError."""
        with self._lock:
            self._alive = False

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self) -> Snapshot:
        """Current text and version, leaving dirty tracking untouched."""
        with self._lock:
            return Snapshot(self._text, self._version)

    def checkpoint(self) -> Snapshot:
        """Take a snapshot carrying the dirty offset, then reset it."""
        with self._lock:
            snap = Snapshot(self._text, self._version, self._dirty_from)
            self._dirty_from = None
            return snap

    def _touch(self, offset: int) -> None:
        self._version += 1
        if self._dirty_from is None or offset < self._dirty_from:
            self._dirty_from = offset

    def _check_alive(self) -> None:
        if not self._alive:
            raise BufferClosedError
