"""
tests/test_cache.py — TTL Cache
===============================
"""

from __future__ import annotations

import pytest

from gavel.engine.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTTLCache:
    def test_hit_before_expiry(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock)
        cache.set("k", 1)
        clock.now = 59.9
        assert cache.get("k") == 1

    def test_miss_after_expiry(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock)
        cache.set("k", 1)
        clock.now = 60
        assert cache.get("k") is None
        assert cache.get("k", "gone") == "gone"

    def test_falsy_values_are_cached(self):
        cache = TTLCache(60, clock=FakeClock())
        cache.set(("g", "u"), False)
        assert cache.get(("g", "u")) is False
        cache.set("empty", [])
        assert cache.get("empty", None) == []

    def test_len_ignores_expired(self):
        clock = FakeClock()
        cache = TTLCache(10, clock=clock)
        cache.set("a", 1)
        clock.now = 5
        cache.set("b", 2)
        clock.now = 11
        assert len(cache) == 1

    def test_full_cache_evicts_soonest_expiry(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock, max_entries=2)
        cache.set("a", 1)
        clock.now = 1
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValueError):
            TTLCache(0)
