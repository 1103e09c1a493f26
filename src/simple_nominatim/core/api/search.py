"""
Search API operations.

See https://nominatim.org/release-docs/develop/api/Search/
"""

from __future__ import annotations

from typing import Any

from simple_nominatim.core.config import CacheConfig, RateLimitConfig, RetryConfig
from simple_nominatim.core.fetch import DataFetcher

from .options import FreeFormSearchParams, SearchOptions, StructuredSearchParams

SEARCH_ENDPOINT = "search"


async def free_form_search(
    fetcher: DataFetcher,
    params: FreeFormSearchParams,
    options: SearchOptions,
    *,
    cache: CacheConfig | None = None,
    rate_limit: RateLimitConfig | None = None,
    retry: RetryConfig | None = None,
) -> Any:
    """Search with a single free-text query, as typed into a search box.

    Args:
        fetcher: Fetcher to issue the request through
        params: The query string
        options: Output format and search options
        cache: Per-call cache overrides
        rate_limit: Per-call rate limit overrides
        retry: Per-call retry overrides

    Returns:
        Parsed results (JSON value, or raw XML text)
    """
    return await fetcher.fetch(
        SEARCH_ENDPOINT,
        [*params.query_items(), *options.query_items()],
        cache=cache,
        rate_limit=rate_limit,
        retry=retry,
    )


async def structured_search(
    fetcher: DataFetcher,
    params: StructuredSearchParams,
    options: SearchOptions,
    *,
    cache: CacheConfig | None = None,
    rate_limit: RateLimitConfig | None = None,
    retry: RetryConfig | None = None,
) -> Any:
    """Search with separate address components (street, city, country...).

    Usually more precise than a free-form query when the address is
    already split into fields.
    """
    return await fetcher.fetch(
        SEARCH_ENDPOINT,
        [*params.query_items(), *options.query_items()],
        cache=cache,
        rate_limit=rate_limit,
        retry=retry,
    )
