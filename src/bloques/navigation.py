"""Forward/backward navigation across blocks and prompts.

The navigator merges two kinds of stops: source block bodies from the
BlockModel, and prompt boundaries supplied by whatever owns prompt framing
in the transcript. Moving picks whichever stop is closer in the requested
direction; on a tie the prompt boundary wins.

Example:
    >>> framing = RegexPromptFraming(r"^> ")
    >>> nav = Navigator(model, framing.boundaries(text))
    >>> nav.next_item(0)
    2

"""

import re
from bisect import bisect_left, bisect_right
from collections.abc import Sequence
from typing import Protocol

from bloques.config import DEFAULT_PROMPT_PATTERN
from bloques.model import BlockModel


class PromptFraming(Protocol):
    """Collaborator that knows where prompts sit in the transcript."""

    def boundaries(self, source: str) -> Sequence[int]:
        """Ordered prompt-boundary offsets within source."""
        ...


class RegexPromptFraming:
    """Prompt framing from a multiline regular expression.

    Each match marks a prompt; its boundary is the end of the match, where
    the user's input begins.
    """

    __slots__ = ("_pattern",)

    def __init__(self, pattern: str = DEFAULT_PROMPT_PATTERN) -> None:
        self._pattern = re.compile(pattern, re.MULTILINE)

    def boundaries(self, source: str) -> tuple[int, ...]:
        return tuple(match.end() for match in self._pattern.finditer(source))


class Navigator:
    """Compute the next or previous stop from point.

    Thread Safety:
        Immutable after creation. Safe to share.
    """

    __slots__ = ("_model", "_boundaries")

    def __init__(self, model: BlockModel, prompt_boundaries: Sequence[int] = ()) -> None:
        self._model = model
        self._boundaries = tuple(sorted(prompt_boundaries))

    def next_item(self, point: int) -> int | None:
        """Offset of the closest stop strictly after point, or None."""
        block = self._model.next_block(point)
        block_stop = block.body.start if block is not None else None

        i = bisect_right(self._boundaries, point)
        prompt_stop = self._boundaries[i] if i < len(self._boundaries) else None

        if prompt_stop is None:
            return block_stop
        if block_stop is None or prompt_stop <= block_stop:
            return prompt_stop
        return block_stop

    def previous_item(self, point: int) -> int | None:
        """Offset of the closest stop strictly before point, or None."""
        block = self._model.previous_block(point)
        block_stop = block.body.start if block is not None else None

        i = bisect_left(self._boundaries, point) - 1
        prompt_stop = self._boundaries[i] if i >= 0 else None

        if prompt_stop is None:
            return block_stop
        if block_stop is None or prompt_stop >= block_stop:
            return prompt_stop
        return block_stop
