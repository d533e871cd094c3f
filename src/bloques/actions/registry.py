"""Custom block actions and their registry.

A custom action overrides execution for one canonical language: it carries
the confirmation prompt shown to the user and the callable run with the
block body.

Thread Safety:
ActionRegistry is immutable after creation. Safe to share.
Use ActionRegistryBuilder for mutable construction.

Example:
    >>> builder = ActionRegistryBuilder()
    >>> builder.register(BlockAction("diff", "Apply patch?", apply_patch))
    >>> registry = builder.build()
    >>> registry.get("diff").prompt
    'Apply patch?'
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class BlockAction:
    """Custom action for one canonical language.

    Attributes:
        language: Canonical language identifier the action handles
        prompt: Confirmation question shown before running
        handler: Callable invoked with the block body text

    """

    language: str
    prompt: str
    handler: Callable[[str], Any]


class ActionRegistry:
    """Immutable mapping of canonical language -> BlockAction."""

    __slots__ = ("_by_language",)

    def __init__(self, by_language: dict[str, BlockAction] | None = None) -> None:
        """Initialize registry with a pre-built mapping.

        Use ActionRegistryBuilder to create instances.
        """
        self._by_language = dict(by_language or {})

    def get(self, language: str | None) -> BlockAction | None:
        """Get the action for a canonical language, if registered."""
        if language is None:
            return None
        return self._by_language.get(language.lower())

    @property
    def languages(self) -> frozenset[str]:
        return frozenset(self._by_language)

    def __contains__(self, language: str) -> bool:
        return language.lower() in self._by_language

    def __len__(self) -> int:
        return len(self._by_language)


class ActionRegistryBuilder:
    """Mutable builder for ActionRegistry."""

    __slots__ = ("_by_language",)

    def __init__(self) -> None:
        self._by_language: dict[str, BlockAction] = {}

    def register(self, action: BlockAction) -> ActionRegistryBuilder:
        """Register an action.

        Returns:
            Self for chaining

        Raises:
            ValueError: If the language already has an action
        """
        key = action.language.lower()
        if key in self._by_language:
            msg = f"Action for '{action.language}' already registered"
            raise ValueError(msg)
        self._by_language[key] = action
        return self

    def register_all(self, actions: list[BlockAction]) -> ActionRegistryBuilder:
        for action in actions:
            self.register(action)
        return self

    def build(self) -> ActionRegistry:
        """Build immutable registry from registered actions."""
        return ActionRegistry(self._by_language)

    def __len__(self) -> int:
        return len(self._by_language)


EMPTY_REGISTRY = ActionRegistry()
