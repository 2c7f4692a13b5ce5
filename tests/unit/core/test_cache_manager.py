"""
CacheManager 단위 테스트

- TTL 경계 (T' - T < TTL 이면 적중, 이상이면 만료)
- 메모리/디스크 백엔드
- 통계 및 상태 점검
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from cachetools import LRUCache

from wikigraph.core.utils.cache_manager import CacheConfig, CacheManager


class TestCacheManagerMemory:
    """메모리 백엔드 테스트 클래스"""

    def test_value_returned_before_ttl(self, cache, clock):
        cache.set("links:a:start", ["a:child"])
        clock.advance(299.9)

        assert cache.get("links:a:start", ttl=300) == ["a:child"]

    def test_value_expired_at_ttl(self, cache, clock):
        cache.set("links:a:start", ["a:child"])
        clock.advance(300)

        assert cache.get("links:a:start", ttl=300) is None
        assert cache.stats["expired"] == 1

    def test_ttl_chosen_per_lookup(self, cache, clock):
        """같은 항목도 조회 TTL에 따라 적중/만료가 달라짐"""
        cache.set("tagindex", {"demo": []})
        clock.advance(600)

        assert cache.get("tagindex", ttl=300) is None
        assert cache.get("tagindex", ttl=3600) == {"demo": []}

    def test_zero_ttl_always_misses(self, cache):
        cache.set("key", "value")

        assert cache.get("key", ttl=0) is None

    def test_missing_key_returns_default(self, cache):
        assert cache.get("missing", ttl=300, default=[]) == []

    def test_falsy_values_are_cached(self, cache):
        cache.set("tags:a:empty", [])

        assert cache.get("tags:a:empty", ttl=300, default=None) == []

    def test_overwrite_refreshes_timestamp(self, cache, clock):
        cache.set("key", "old")
        clock.advance(250)
        cache.set("key", "new")
        clock.advance(100)

        assert cache.get("key", ttl=300) == "new"

    def test_delete_and_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.delete("a") is True
        assert cache.delete("a") is False

        cache.clear()
        assert cache.get("b", ttl=300) is None

    def test_stats(self, cache):
        cache.set("a", 1)
        cache.get("a", ttl=300)
        cache.get("missing", ttl=300)

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["sets"] == 1
        assert stats["hit_rate"] == 0.5

    def test_lru_bound(self, clock):
        cache = CacheManager(CacheConfig(backend="memory", max_entries=2), clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert cache.get_stats()["size"] == 2
        assert cache.get("a", ttl=300) is None

    def test_health_check(self, cache):
        result = cache.health_check()

        assert result["status"] == "healthy"
        assert result["backend"] == "memory"


class LockCheckingCache(LRUCache):
    """접근 시 관리자 락이 잡혀 있는지 확인하는 LRUCache"""

    def __init__(self, lock, maxsize):
        super().__init__(maxsize=maxsize)
        self.lock = lock
        self.unlocked_access = 0

    def _check(self):
        if not self.lock.locked():
            self.unlocked_access += 1

    def __getitem__(self, key):
        self._check()
        return super().__getitem__(key)

    def __setitem__(self, key, value):
        self._check()
        super().__setitem__(key, value)

    def __delitem__(self, key):
        self._check()
        super().__delitem__(key)


class TestCacheManagerThreads:
    """작업 스레드 동시 접근 테스트 클래스"""

    def test_store_access_holds_lock(self, clock):
        cache = CacheManager(CacheConfig(backend="memory", max_entries=2), clock=clock)
        store = LockCheckingCache(cache._lock, maxsize=2)
        cache.cache = store

        for key in ["a", "b", "c"]:
            cache.set(key, key)
            cache.get(key, ttl=300)
        cache.delete("c")

        assert store.unlocked_access == 0

    def test_concurrent_writes_with_eviction(self, clock):
        cache = CacheManager(CacheConfig(backend="memory", max_entries=8), clock=clock)

        def worker(n):
            for i in range(200):
                key = f"links:p{n}:{i}"
                cache.set(key, [i])
                cache.get(key, ttl=300)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(8)))

        assert cache.get_stats()["size"] <= 8


class TestCacheManagerDisk:
    """디스크 백엔드 테스트 클래스"""

    @pytest.fixture
    def disk_cache(self, tmp_path, clock):
        manager = CacheManager(CacheConfig(backend="disk", cache_dir=str(tmp_path)), clock=clock)
        yield manager
        manager.close()

    def test_roundtrip_and_expiry(self, disk_cache, clock):
        disk_cache.set("graph:", {"nodes": [], "edges": []})

        assert disk_cache.get("graph:", ttl=300) == {"nodes": [], "edges": []}

        clock.advance(300)
        assert disk_cache.get("graph:", ttl=300) is None

    def test_shared_between_instances(self, tmp_path, clock):
        config = CacheConfig(backend="disk", cache_dir=str(tmp_path))
        writer = CacheManager(config, clock=clock)
        writer.set("pagename:a:start", {"id": "a:start", "title": "Start"})
        writer.close()

        reader = CacheManager(config, clock=clock)
        try:
            assert reader.get("pagename:a:start", ttl=300)["title"] == "Start"
        finally:
            reader.close()

