"""Thread-safe LRU caches shared by the lookup and plan layers."""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import Any

from cachetools import LRUCache

_MISSING = object()


class SharedLRUCache:
    """A ``cachetools.LRUCache`` behind a lock.

    ``get`` promotes the entry to most-recently-used and ``put`` lets the
    underlying cache evict the least-recently-used entry.  Every lookup and
    store runs under the lock so the cache can be shared between worker
    threads.  ``None`` is a legitimate cached value (negative results), so
    use ``key in cache`` or the *default* argument to tell a miss apart from
    a cached ``None``.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("Cache capacity must be at least 1.")
        self.capacity = capacity
        self._data: LRUCache = LRUCache(maxsize=capacity)
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._data

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            value = self._data.get(key, _MISSING)
            if value is _MISSING:
                self.misses += 1
                return default
            self.hits += 1
            return value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            if key not in self._data and len(self._data) >= self._data.maxsize:
                self.evictions += 1
            self._data[key] = value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0
