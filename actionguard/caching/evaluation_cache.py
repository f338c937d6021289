"""
Per-instance evaluation cache.

Each Policy instance owns one EvaluationCache recording the outcome of
every check it has resolved, keyed by ``(action_id, object_identity)``
with ``None`` standing for the no-object case. Entries never expire
and are never invalidated: a policy instance answers each key at most
once, giving callers a consistent snapshot for the whole request even
if grants change underneath it. Build a new Policy to observe new
grants.

The cache is a plain dict without locking; a policy instance is meant
to be used from one request or session at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

CacheKey = tuple[int, Hashable]


@dataclass
class CacheStats:
    """
    Evaluation cache statistics.

    Attributes:
        hits: Number of checks answered from the cache.
        misses: Number of checks that had to be resolved.
        stores: Number of results recorded.
    """

    hits: int = 0
    misses: int = 0
    stores: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "stores": self.stores,
            "hit_rate": self.hit_rate,
        }


class EvaluationCache:
    """
    Non-invalidating memo of check outcomes for one policy instance.

    Example:
        >>> cache = EvaluationCache()
        >>> cache.lookup((2, None)) is None
        True
        >>> cache.store((2, None), False)
        >>> cache.lookup((2, None))
        False
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, bool] = {}
        self._stats = CacheStats()

    @staticmethod
    def key(action_id: int, identity: Hashable | None) -> CacheKey:
        return (action_id, identity)

    def lookup(self, key: CacheKey) -> bool | None:
        """
        Return the cached outcome for ``key``, or None on a miss.

        Hits and misses are counted in ``stats``.
        """
        value = self._entries.get(key)
        if value is None:
            self._stats.misses += 1
            return None
        self._stats.hits += 1
        return value

    def store(self, key: CacheKey, value: bool) -> None:
        """
        Record the outcome for ``key``.

        Raises:
            KeyError: If ``key`` already holds an outcome.
        """
        if key in self._entries:
            raise KeyError(f"Evaluation for {key!r} is already cached")
        self._entries[key] = bool(value)
        self._stats.stores += 1
        logger.debug(f"Cached evaluation {key!r} -> {value}")

    def setdefault(self, key: CacheKey, value: bool) -> bool:
        """
        Record the outcome for ``key`` unless one is already cached.

        A check can resolve the same key while it is still being
        resolved, e.g. an override checking another action that shares
        its id. The first recorded outcome wins.

        Returns:
            The outcome cached for ``key``.
        """
        if key in self._entries:
            return self._entries[key]
        self.store(key, value)
        return bool(value)

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def keys(self) -> list[CacheKey]:
        return list(self._entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": len(self._entries),
            "stats": self._stats.to_dict(),
        }

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CacheKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"EvaluationCache(size={len(self._entries)}, stats={self._stats})"
