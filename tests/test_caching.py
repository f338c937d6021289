"""
Tests for the evaluation cache.
"""

from __future__ import annotations

import pytest

from actionguard.caching import CacheStats, EvaluationCache


class TestCacheStats:
    """Tests for CacheStats dataclass."""

    def test_hit_rate(self):
        """Test hit rate calculation."""
        stats = CacheStats(hits=3, misses=1)
        assert stats.hit_rate == 0.75

        stats = CacheStats(hits=0, misses=0)
        assert stats.hit_rate == 0.0

    def test_to_dict(self):
        d = CacheStats(hits=1, misses=1, stores=1).to_dict()

        assert d == {"hits": 1, "misses": 1, "stores": 1, "hit_rate": 0.5}


class TestEvaluationCache:
    """Tests for EvaluationCache."""

    def test_miss_then_hit(self):
        cache = EvaluationCache()
        key = EvaluationCache.key(2, None)

        assert cache.lookup(key) is None
        cache.store(key, False)
        assert cache.lookup(key) is False

        assert cache.stats.misses == 1
        assert cache.stats.hits == 1
        assert cache.stats.stores == 1

    def test_false_is_a_hit(self):
        cache = EvaluationCache()
        cache.store((1, None), False)

        assert cache.lookup((1, None)) is False
        assert cache.stats.hits == 1

    def test_general_and_object_keys_are_distinct(self):
        cache = EvaluationCache()
        cache.store((1, None), True)

        assert cache.lookup((1, 7)) is None
        assert (1, None) in cache
        assert (1, 7) not in cache

    def test_entries_cannot_be_replaced(self):
        cache = EvaluationCache()
        cache.store((1, None), False)

        with pytest.raises(KeyError):
            cache.store((1, None), True)

        assert cache.lookup((1, None)) is False

    def test_values_are_normalized_to_bool(self):
        cache = EvaluationCache()
        cache.store((1, None), 1)  # type: ignore[arg-type]

        assert cache.lookup((1, None)) is True

    def test_iteration_and_len(self):
        cache = EvaluationCache()
        cache.store((1, None), True)
        cache.store((4, 7), False)

        assert len(cache) == 2
        assert set(cache) == {(1, None), (4, 7)}
        assert cache.to_dict()["size"] == 2

    def test_setdefault_records_new_entry(self):
        cache = EvaluationCache()

        assert cache.setdefault((2, None), False) is False
        assert cache.lookup((2, None)) is False
        assert cache.stats.stores == 1

    def test_setdefault_keeps_first_outcome(self):
        cache = EvaluationCache()
        cache.store((2, None), False)

        assert cache.setdefault((2, None), True) is False
        assert cache.lookup((2, None)) is False
        assert cache.stats.stores == 1
