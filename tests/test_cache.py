from __future__ import annotations

import threading

import cachetools
import pytest

from vacationmax.cache import SharedLRUCache


class TestSharedLRUCache:
    def test_get_and_put(self) -> None:
        cache = SharedLRUCache(2)
        cache.put("a", 1)
        assert cache.get("a") == 1
        assert cache.get("missing") is None
        assert cache.get("missing", "fallback") == "fallback"

    def test_evicts_least_recently_used(self) -> None:
        cache = SharedLRUCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)
        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert cache.evictions == 1

    def test_overwrite_refreshes_recency(self) -> None:
        cache = SharedLRUCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 10)
        cache.put("c", 3)
        assert cache.get("a") == 10
        assert "b" not in cache

    def test_none_is_a_cached_value(self) -> None:
        cache = SharedLRUCache(4)
        cache.put("negative", None)
        assert "negative" in cache
        sentinel = object()
        assert cache.get("negative", sentinel) is None

    def test_counters_and_clear(self) -> None:
        cache = SharedLRUCache(4)
        cache.put("a", 1)
        cache.get("a")
        cache.get("b")
        assert (cache.hits, cache.misses) == (1, 1)
        cache.clear()
        assert len(cache) == 0
        assert (cache.hits, cache.misses, cache.evictions) == (0, 0, 0)

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            SharedLRUCache(0)

    def test_concurrent_puts_respect_capacity(self) -> None:
        cache = SharedLRUCache(16)

        def fill(offset: int) -> None:
            for i in range(200):
                cache.put((offset, i), i)
                cache.get((offset, i // 2))

        threads = [threading.Thread(target=fill, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 16

    def test_backed_by_cachetools(self) -> None:
        cache = SharedLRUCache(3)
        assert isinstance(cache._data, cachetools.LRUCache)
        assert cache._data.maxsize == 3
