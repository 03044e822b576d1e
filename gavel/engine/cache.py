"""
gavel.engine.cache — Small Thread-Safe TTL Cache
=================================================

Bounds call volume to Discord for data that is allowed to be a little stale
(dashboard authorization, ticket activity).  Entries expire purely by
age; writes to the roster never invalidate them, so callers must tolerate
up to ``ttl_seconds`` of staleness.

The clock is injectable so tests can move time without sleeping::

    now = [0.0]
    cache = TTLCache(60, clock=lambda: now[0])
    cache.set("k", 1)
    now[0] = 61
    assert cache.get("k") is None
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Hashable
from typing import Any


class TTLCache:
    """Key → (value, expiry) map guarded by a lock."""

    def __init__(
        self,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 4096,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._data: dict[Hashable, tuple[Any, float]] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        now = self._clock()
        with self._lock:
            hit = self._data.get(key)
            if hit is None:
                return default
            value, expires_at = hit
            if expires_at <= now:
                del self._data[key]
                return default
            return value

    def set(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        with self._lock:
            if len(self._data) >= self._max_entries:
                self._purge_expired(now)
                if len(self._data) >= self._max_entries:
                    # Still full: drop the entry closest to expiry
                    oldest = min(self._data, key=lambda k: self._data[k][1])
                    del self._data[oldest]
            self._data[key] = (value, now + self.ttl_seconds)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, exp) in self._data.items() if exp <= now]
        for k in expired:
            del self._data[k]

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            return len(self._data)
