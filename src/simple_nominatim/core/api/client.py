"""
Nominatim client.

Composes the HTTP client, the data fetcher and the four API operations
into one session object. All shared state (caches, rate limiters, the
connection) belongs to the client instance.
"""

from __future__ import annotations

import asyncio
import random
import time
from typing import Any, Awaitable, Callable, TypeVar

import httpx

from simple_nominatim.core.config import (
    CacheConfig,
    ClientConfig,
    RateLimitConfig,
    RetryConfig,
)
from simple_nominatim.core.fetch import DataFetcher
from simple_nominatim.core.fetch.query import QueryInput
from simple_nominatim.core.logging import get_logger

from .options import (
    FreeFormSearchParams,
    OutputFormat,
    RequestOptions,
    ReverseGeocodeParams,
    ReverseOptions,
    SearchOptions,
    StatusOptions,
    StructuredSearchParams,
)
from .reverse import reverse_geocode
from .search import free_form_search, structured_search
from .status import service_status

logger = get_logger("client")

OptionsT = TypeVar("OptionsT", bound=RequestOptions)


class NominatimClient:
    """Async client for the Nominatim API.

    Usage:
        async with NominatimClient() as client:
            results = await client.search(FreeFormSearchParams(query="Paris"))
            status = await client.status()

    Per-call ``cache``, ``rate_limit`` and ``retry`` arguments override only
    the fields they set; everything else comes from ``config``.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        random_source: Callable[[], float] = random.random,
    ):
        """Initialize the client.

        Args:
            config: Client configuration (defaults apply when omitted)
            http_client: Existing httpx client; when given, the caller owns it
            clock: Monotonic time source in seconds
            sleep: Coroutine used for throttle and backoff waits
            random_source: Jitter source returning floats in [0, 1)
        """
        self.config = config or ClientConfig()

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
        )

        self.fetcher = DataFetcher(
            self._http_client,
            base_url=self.config.base_url,
            user_agent=self.config.user_agent,
            cache=self.config.cache,
            rate_limit=self.config.rate_limit,
            retry=self.config.retry,
            clock=clock,
            sleep=sleep,
            random_source=random_source,
        )

    async def __aenter__(self) -> "NominatimClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    def _with_default_email(self, options: OptionsT) -> OptionsT:
        if options.email is None and self.config.email:
            return options.model_copy(update={"email": self.config.email})
        return options

    # -------------------------------------------------------------------------
    # API operations
    # -------------------------------------------------------------------------

    async def search(
        self,
        params: FreeFormSearchParams,
        options: SearchOptions | None = None,
        *,
        cache: CacheConfig | None = None,
        rate_limit: RateLimitConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> Any:
        """Free-form search. Results default to ``jsonv2``."""
        options = self._with_default_email(options or SearchOptions(format=OutputFormat.JSONV2))
        return await free_form_search(
            self.fetcher, params, options, cache=cache, rate_limit=rate_limit, retry=retry
        )

    async def structured_search(
        self,
        params: StructuredSearchParams,
        options: SearchOptions | None = None,
        *,
        cache: CacheConfig | None = None,
        rate_limit: RateLimitConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> Any:
        """Structured address search. Results default to ``jsonv2``."""
        options = self._with_default_email(options or SearchOptions(format=OutputFormat.JSONV2))
        return await structured_search(
            self.fetcher, params, options, cache=cache, rate_limit=rate_limit, retry=retry
        )

    async def reverse(
        self,
        params: ReverseGeocodeParams,
        options: ReverseOptions | None = None,
        *,
        cache: CacheConfig | None = None,
        rate_limit: RateLimitConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> Any:
        """Reverse geocode a coordinate. Results default to ``jsonv2``."""
        options = self._with_default_email(options or ReverseOptions(format=OutputFormat.JSONV2))
        return await reverse_geocode(
            self.fetcher, params, options, cache=cache, rate_limit=rate_limit, retry=retry
        )

    async def status(
        self,
        options: StatusOptions | None = None,
        *,
        cache: CacheConfig | None = None,
        rate_limit: RateLimitConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> Any:
        """Service status, as text (``"OK"``) unless JSON is requested."""
        return await service_status(
            self.fetcher, options, cache=cache, rate_limit=rate_limit, retry=retry
        )

    async def fetch(
        self,
        endpoint: str,
        params: QueryInput = None,
        *,
        cache: CacheConfig | None = None,
        rate_limit: RateLimitConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> Any:
        """Low-level access to any endpoint through the same pipeline."""
        return await self.fetcher.fetch(
            endpoint, params, cache=cache, rate_limit=rate_limit, retry=retry
        )

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def cache_stats(self) -> dict[str, Any]:
        return self.fetcher.cache.stats()

    def rate_limit_stats(self) -> dict[str, int]:
        return self.fetcher.rate_limiter.stats()

    def reset(self) -> None:
        """Drop all cached responses, throttle state and statistics."""
        logger.debug("Resetting caches and rate limiters")
        self.fetcher.reset()
