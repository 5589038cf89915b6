"""
Simple caching utilities for performance optimization.

Provides a thread-safe time-based cache; callers choose TTL and size.
"""

from __future__ import annotations
from cachetools import TTLCache
from typing import Any, Hashable, Optional
import threading

_MISSING = object()


class LockedTTLCache:
    """
    TTLCache guarded by a lock so request threads can share it.

    Usage:
        cache = LockedTTLCache(ttl=600, maxsize=64)
        hit = cache.get("weather:pune")
        if hit is None:
            hit = expensive_lookup()
            cache.set("weather:pune", hit)
    """

    def __init__(self, ttl: float, maxsize: int):
        self._cache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            value = self._cache.get(key, _MISSING)
        return None if value is _MISSING else value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def clear(self) -> None:
        """
        Clear the entire cache.

        Useful for:
        - Testing
        - Manual cache invalidation
        """
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
