"""Content-addressed model cache for Bloques.

Provides (content_hash, config_hash) -> BlockModel caching so that refreshes
of unchanged text (undo/revert, repeated renders of a finished transcript)
skip the scan entirely.

Thread Safety:
    DictModelCache is not thread-safe. Scanning runs on the interaction
    thread; wrap with a lock if a host shares one cache across threads.

Example:
    >>> from bloques import resolve, DictModelCache
    >>> cache = DictModelCache()
    >>> model1 = resolve("# Hello", cache=cache)
    >>> model2 = resolve("# Hello", cache=cache)  # Cache hit, no re-scan
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from bloques.config import EngineConfig
    from bloques.model import BlockModel


class ModelCache(Protocol):
    """Protocol for content-addressed model caches.

    Cache key is (content_hash, config_hash). Cached value is BlockModel,
    which is immutable and safe to share.
    """

    def get(self, content_hash: str, config_hash: str) -> BlockModel | None:
        """Return cached BlockModel if present, else None."""
        ...

    def put(self, content_hash: str, config_hash: str, model: BlockModel) -> None:
        """Store BlockModel in cache."""
        ...


class DictModelCache:
    """In-memory model cache using a dict.

    Not thread-safe. For shared use, wrap with a lock.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], BlockModel] = {}

    def __len__(self) -> int:
        return len(self._data)

    def get(self, content_hash: str, config_hash: str) -> BlockModel | None:
        """Return cached BlockModel if present, else None."""
        return self._data.get((content_hash, config_hash))

    def put(self, content_hash: str, config_hash: str, model: BlockModel) -> None:
        """Store BlockModel in cache."""
        self._data[(content_hash, config_hash)] = model

    def clear(self) -> None:
        self._data.clear()


def hash_content(source: str) -> str:
    """SHA-256 hex digest of the buffer text."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def hash_config(config: EngineConfig) -> str:
    """Compute hash of the scan-relevant part of EngineConfig.

    Only fields that change scanning output participate; render and
    dispatch settings do not invalidate cached models.
    """
    key = f"max_header_level={config.max_header_level}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]


__all__ = [
    "DictModelCache",
    "ModelCache",
    "hash_config",
    "hash_content",
]
