"""
Evaluation caching for actionguard.

Policy instances memoize each resolved check for their whole lifetime.

Example:
    >>> from actionguard.caching import EvaluationCache
    >>>
    >>> cache = EvaluationCache()
    >>> cache.store(EvaluationCache.key(4, 7), True)
    >>> cache.lookup((4, 7))
    True
"""

from actionguard.caching.evaluation_cache import (
    CacheKey,
    CacheStats,
    EvaluationCache,
)

__all__ = [
    "CacheKey",
    "CacheStats",
    "EvaluationCache",
]
