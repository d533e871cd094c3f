"""Half-open offset spans over transcript text.

Every structure Bloques surfaces is keyed by ``Span`` values: plain
``[start, end)`` character offsets into one buffer snapshot. Spans are only
meaningful until the next buffer mutation.

Thread Safety:
Span is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """Half-open ``[start, end)`` interval of buffer offsets.

    Attributes:
        start: First offset covered by the span
        end: Offset one past the last covered character

    Examples:
        >>> span = Span(4, 9)
        >>> len(span)
        5
        >>> span.slice("```python\\n")
        'ython'
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid span [{self.start}, {self.end})"
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"

    @property
    def is_empty(self) -> bool:
        """True for zero-width spans (e.g. a missing language tag)."""
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        """Check whether offset falls inside the span."""
        return self.start <= offset < self.end

    def intersects(self, other: Span) -> bool:
        """Check whether two spans share at least one character."""
        if self.is_empty or other.is_empty:
            return False
        return self.start < other.end and other.start < self.end

    def covers(self, other: Span) -> bool:
        """Check whether other lies entirely within this span."""
        return self.start <= other.start and other.end <= self.end

    def slice(self, source: str) -> str:
        """Extract the covered text from source."""
        return source[self.start : self.end]

    def shift(self, delta: int) -> Span:
        """Return the span moved by delta characters."""
        return Span(self.start + delta, self.end + delta)

    def span_to(self, end: Span) -> Span:
        """Create a new span from this span's start to end's end."""
        return Span(self.start, end.end)
