"""
Data fetcher - the single entry point for Nominatim HTTP calls.

Every request goes through the same fixed pipeline:

1. Cache lookup (a hit returns immediately, no network, no throttling)
2. Rate limiter slot
3. HTTP GET inside the retry loop
4. Body parsing (text for ``format=text|xml``, JSON otherwise)
5. Cache store
"""

from __future__ import annotations

import asyncio
import random
import time
from typing import Any, Awaitable, Callable

import httpx

from simple_nominatim.core.config import (
    DEFAULT_BASE_URL,
    DEFAULT_USER_AGENT,
    CacheConfig,
    RateLimitConfig,
    RetryConfig,
    merge_config,
)
from simple_nominatim.core.logging import get_contextual_logger

from .base import HTTPStatusError, RequestDescriptor, ResponseParseError
from .caching import CacheManager
from .query import QueryInput, build_query_params
from .retries import RetryPolicy
from .throttling import RateLimiter

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]
RandomSource = Callable[[], float]


class DataFetcher:
    """Fetches and parses Nominatim responses with cache, throttle and retry.

    Cache managers and rate limiters are owned by the fetcher and shared by
    every call that resolves to the same configuration, so a client session
    keeps one cache and one throttle window per distinct setting. Per-call
    overrides are merged field by field over the fetcher defaults.

    A rate limit override that differs from the defaults gets its own
    throttle window, which runs alongside the default one; combined traffic
    is bounded only per window, not across them.

    Usage:
        async with httpx.AsyncClient() as http:
            fetcher = DataFetcher(http)
            data = await fetcher.fetch("search", {"q": "Paris", "format": "json"})
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        cache: CacheConfig | None = None,
        rate_limit: RateLimitConfig | None = None,
        retry: RetryConfig | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        random_source: RandomSource = random.random,
    ):
        """Initialize the fetcher.

        Args:
            http_client: Client used for all requests (not closed here)
            base_url: Origin of the Nominatim instance
            user_agent: User-Agent header sent with every request
            cache: Default cache configuration
            rate_limit: Default rate limit configuration
            retry: Default retry configuration
            clock: Monotonic time source in seconds
            sleep: Coroutine used for throttle and backoff waits
            random_source: Jitter source returning floats in [0, 1)
        """
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent

        self.cache_config = cache or CacheConfig()
        self.rate_limit_config = rate_limit or RateLimitConfig()
        self.retry_config = retry or RetryConfig()

        self._clock = clock
        self._sleep = sleep
        self._random = random_source

        self._caches: dict[CacheConfig, CacheManager] = {}
        self._limiters: dict[RateLimitConfig, RateLimiter] = {}

    # -------------------------------------------------------------------------
    # Owned resources
    # -------------------------------------------------------------------------

    def cache_for(self, config: CacheConfig) -> CacheManager:
        """Get or create the cache manager for a resolved configuration."""
        if config not in self._caches:
            self._caches[config] = CacheManager(config, clock=self._clock)
        return self._caches[config]

    def limiter_for(self, config: RateLimitConfig) -> RateLimiter:
        """Get or create the rate limiter for a resolved configuration."""
        if config not in self._limiters:
            self._limiters[config] = RateLimiter(config, clock=self._clock, sleep=self._sleep)
        return self._limiters[config]

    @property
    def cache(self) -> CacheManager:
        """Cache manager for the default configuration."""
        return self.cache_for(self.cache_config)

    @property
    def rate_limiter(self) -> RateLimiter:
        """Rate limiter for the default configuration."""
        return self.limiter_for(self.rate_limit_config)

    def reset(self) -> None:
        """Discard every owned cache and rate limiter."""
        for cache in self._caches.values():
            cache.clear()
        self._caches.clear()
        self._limiters.clear()

    # -------------------------------------------------------------------------
    # Request pipeline
    # -------------------------------------------------------------------------

    def build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint}"

    async def _attempt(self, request: RequestDescriptor) -> Any:
        """Perform one HTTP GET and parse the body."""
        response = await self.http_client.get(
            self.build_url(request.endpoint),
            params=request.params,
            headers={"User-Agent": self.user_agent},
        )

        if not response.is_success:
            raise HTTPStatusError.from_response(response)

        if request.expects_text:
            return response.text

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(
                f"Invalid JSON in response: {e}",
                url=str(response.url),
                body=response.text[:500],
            ) from e

    async def fetch(
        self,
        endpoint: str,
        params: QueryInput = None,
        *,
        cache: CacheConfig | None = None,
        rate_limit: RateLimitConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> Any:
        """Fetch an endpoint and return the parsed body.

        Args:
            endpoint: Endpoint name (``search``, ``reverse``, ``status``)
            params: Query parameters; ``None`` values are omitted
            cache: Per-call cache overrides
            rate_limit: Per-call rate limit overrides
            retry: Per-call retry overrides

        Returns:
            Parsed JSON value, or the raw body for text/xml formats

        Raises:
            HTTPStatusError: Non-2xx response that was not (or no longer) retried
            ResponseParseError: JSON expected but body was not valid JSON
            httpx.TransportError: Network failure after all attempts
        """
        request = RequestDescriptor(endpoint=endpoint, params=build_query_params(params))
        log = get_contextual_logger("fetch", endpoint=endpoint)

        cache_manager = self.cache_for(merge_config(self.cache_config, cache))
        cached = cache_manager.get(request.endpoint, request.params)
        if cached is not None:
            log.debug("Served from cache")
            return cached

        limiter = self.limiter_for(merge_config(self.rate_limit_config, rate_limit))
        policy = RetryPolicy(
            merge_config(self.retry_config, retry),
            sleep=self._sleep,
            random_source=self._random,
        )

        started = self._clock()
        result = await limiter.execute(lambda: policy.call(lambda: self._attempt(request)))
        log.debug(
            "Fetched %s in %.0fms",
            self.build_url(endpoint),
            (self._clock() - started) * 1000,
            extra={"url": self.build_url(endpoint)},
        )

        cache_manager.set(request.endpoint, request.params, result)
        return result
