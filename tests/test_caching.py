"""Tests for the in-memory response cache."""

import httpx

from simple_nominatim.core.config import CacheConfig
from simple_nominatim.core.fetch import CacheManager, make_cache_key


class TestMakeCacheKey:
    """Tests for cache key derivation."""

    def test_key_ignores_parameter_order(self):
        k1 = make_cache_key("search", [("q", "Paris"), ("format", "json")])
        k2 = make_cache_key("search", [("format", "json"), ("q", "Paris")])
        assert k1 == k2

    def test_key_includes_endpoint(self):
        params = [("format", "json")]
        assert make_cache_key("search", params) != make_cache_key("reverse", params)

    def test_key_accepts_query_params(self):
        qp = httpx.QueryParams([("q", "Paris"), ("format", "json")])
        assert make_cache_key("search", qp) == "search:format=json&q=Paris"

    def test_repeated_names_keep_relative_order(self):
        k1 = make_cache_key("search", [("a", "1"), ("a", "2")])
        k2 = make_cache_key("search", [("a", "2"), ("a", "1")])
        assert k1 != k2


class TestCacheManager:
    """Tests for CacheManager get/set/has and statistics."""

    def test_set_then_get_in_other_order(self, clock):
        cache = CacheManager(CacheConfig(), clock=clock)
        cache.set("search", [("q", "Paris"), ("format", "json")], {"place_id": 1})

        assert cache.get("search", [("format", "json"), ("q", "Paris")]) == {"place_id": 1}

    def test_ttl_expiry(self, clock):
        cache = CacheManager(CacheConfig(ttl=1000), clock=clock)
        cache.set("status", [("format", "text")], "OK")

        clock.advance(0.999)
        assert cache.get("status", [("format", "text")]) == "OK"

        clock.advance(0.002)
        assert cache.get("status", [("format", "text")]) is None

    def test_lru_bound(self, clock):
        cache = CacheManager(CacheConfig(max_size=3), clock=clock)
        for i in range(5):
            cache.set("search", [("q", str(i))], i)

        assert cache.stats()["size"] == 3
        assert not cache.has("search", [("q", "0")])
        assert not cache.has("search", [("q", "1")])
        assert cache.has("search", [("q", "4")])

    def test_get_refreshes_recency(self, clock):
        cache = CacheManager(CacheConfig(max_size=2), clock=clock)
        cache.set("search", [("q", "a")], "a")
        cache.set("search", [("q", "b")], "b")

        cache.get("search", [("q", "a")])
        cache.set("search", [("q", "c")], "c")

        assert cache.has("search", [("q", "a")])
        assert not cache.has("search", [("q", "b")])

    def test_has_does_not_refresh_recency(self, clock):
        cache = CacheManager(CacheConfig(max_size=2), clock=clock)
        cache.set("search", [("q", "a")], "a")
        cache.set("search", [("q", "b")], "b")

        assert cache.has("search", [("q", "a")])
        cache.set("search", [("q", "c")], "c")

        assert not cache.has("search", [("q", "a")])
        assert cache.has("search", [("q", "b")])

    def test_set_overwrites(self, clock):
        cache = CacheManager(CacheConfig(), clock=clock)
        cache.set("search", [("q", "x")], 1)
        cache.set("search", [("q", "x")], 2)

        assert cache.get("search", [("q", "x")]) == 2
        assert cache.stats()["size"] == 1

    def test_hit_rate(self, clock):
        cache = CacheManager(CacheConfig(), clock=clock)
        cache.set("search", [("q", "x")], 1)

        cache.get("search", [("q", "x")])
        cache.get("search", [("q", "x")])
        cache.get("search", [("q", "y")])

        stats = cache.stats()
        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["hit_rate"] == round(2 / 3, 2)

    def test_hit_rate_without_lookups(self, clock):
        cache = CacheManager(CacheConfig(), clock=clock)
        assert cache.stats() == {"hits": 0, "misses": 0, "hit_rate": 0.0, "size": 0}

    def test_has_does_not_count(self, clock):
        cache = CacheManager(CacheConfig(), clock=clock)
        cache.set("search", [("q", "x")], 1)

        assert cache.has("search", [("q", "x")])
        assert not cache.has("search", [("q", "y")])
        assert cache.stats()["hits"] == 0
        assert cache.stats()["misses"] == 0

    def test_disabled_cache_never_counts(self, clock):
        cache = CacheManager(CacheConfig(enabled=False), clock=clock)
        cache.set("search", [("q", "x")], 1)

        assert cache.get("search", [("q", "x")]) is None
        assert not cache.has("search", [("q", "x")])
        assert cache.stats() == {"hits": 0, "misses": 0, "hit_rate": 0.0, "size": 0}

    def test_disabling_discards_entries(self, clock):
        cache = CacheManager(CacheConfig(), clock=clock)
        cache.set("search", [("q", "x")], 1)
        cache.get("search", [("q", "x")])

        cache.set_enabled(False)
        cache.set_enabled(True)

        assert cache.enabled
        assert cache.get("search", [("q", "x")]) is None
        assert cache.stats()["hits"] == 0

    def test_clear_resets_counters(self, clock):
        cache = CacheManager(CacheConfig(), clock=clock)
        cache.set("search", [("q", "x")], 1)
        cache.get("search", [("q", "x")])

        cache.clear()

        assert cache.stats() == {"hits": 0, "misses": 0, "hit_rate": 0.0, "size": 0}

    def test_zero_ttl_always_misses(self, clock):
        cache = CacheManager(CacheConfig(ttl=0), clock=clock)
        cache.set("search", [("q", "x")], 1)

        assert cache.get("search", [("q", "x")]) is None

    def test_zero_max_size_always_misses(self, clock):
        cache = CacheManager(CacheConfig(max_size=0), clock=clock)
        cache.set("search", [("q", "x")], 1)

        assert cache.get("search", [("q", "x")]) is None
        assert cache.stats()["size"] == 0

    def test_stats_size_excludes_expired(self, clock):
        cache = CacheManager(CacheConfig(ttl=100), clock=clock)
        cache.set("search", [("q", "x")], 1)
        clock.advance(1)

        assert cache.stats()["size"] == 0
