"""
In-memory response cache.

Backed by ``cachetools.TTLCache``: least-recently-used eviction bounded by
``max_size`` with a per-entry time-to-live. Keys are derived from the
endpoint and the query parameters sorted by name, so parameter insertion
order never affects lookups.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Iterable

import httpx
from cachetools import TTLCache

from simple_nominatim.core.config import CacheConfig
from simple_nominatim.core.logging import get_logger

logger = get_logger("cache")

Clock = Callable[[], float]

ParamsLike = httpx.QueryParams | Iterable[tuple[str, str]]

_MISSING = object()


def make_cache_key(endpoint: str, params: ParamsLike) -> str:
    """Derive the cache key for an endpoint and its query parameters.

    Parameters are sorted by name only; repeated names keep their
    relative order.
    """
    items = params.multi_items() if isinstance(params, httpx.QueryParams) else list(params)
    ordered = sorted(items, key=lambda item: item[0])
    return f"{endpoint}:{httpx.QueryParams(ordered)}"


class CacheManager:
    """LRU + TTL cache for parsed Nominatim responses.

    Safe to share between tasks of one event loop: no method awaits.
    """

    def __init__(self, config: CacheConfig | None = None, clock: Clock = time.monotonic):
        """Initialize the cache.

        Args:
            config: Cache configuration (defaults apply when omitted)
            clock: Monotonic time source in seconds, injectable for tests
        """
        self.config = config or CacheConfig()
        self._enabled = self.config.enabled
        self._store: TTLCache[str, Any] = TTLCache(
            maxsize=self.config.max_size,
            ttl=self.config.ttl / 1000.0,
            timer=clock,
        )
        self._hits = 0
        self._misses = 0

    def get(self, endpoint: str, params: ParamsLike) -> Any | None:
        """Get a cached value, or None when absent, expired or disabled.

        Counts a hit or a miss unless caching is disabled.
        """
        if not self._enabled:
            return None

        key = make_cache_key(endpoint, params)
        value = self._store.get(key, _MISSING)

        if value is _MISSING:
            self._misses += 1
            logger.debug("Cache miss: %s", key)
            return None

        self._hits += 1
        logger.debug("Cache hit: %s", key)
        return value

    def set(self, endpoint: str, params: ParamsLike, value: Any) -> None:
        """Store a value, evicting least recently used entries past max_size."""
        # TTLCache rejects any item once maxsize is 0
        if not self._enabled or self.config.max_size == 0:
            return

        key = make_cache_key(endpoint, params)
        self._store[key] = value

    def has(self, endpoint: str, params: ParamsLike) -> bool:
        """Check for a live entry without touching counters or recency."""
        if not self._enabled:
            return False
        return make_cache_key(endpoint, params) in self._store

    def clear(self) -> None:
        """Drop all entries and reset hit/miss counters."""
        self._store.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, hit_rate (rounded to 2 decimals)
            and size (live entries)
        """
        self._store.expire()
        total = self._hits + self._misses
        hit_rate = self._hits / total if total else 0.0
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 2),
            "size": len(self._store),
        }

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable caching. Disabling discards every entry."""
        self._enabled = enabled
        if not enabled:
            self.clear()
