"""
Reverse geocoding API operation.

See https://nominatim.org/release-docs/develop/api/Reverse/
"""

from __future__ import annotations

from typing import Any

from simple_nominatim.core.config import CacheConfig, RateLimitConfig, RetryConfig
from simple_nominatim.core.fetch import DataFetcher

from .options import ReverseGeocodeParams, ReverseOptions

REVERSE_ENDPOINT = "reverse"


async def reverse_geocode(
    fetcher: DataFetcher,
    params: ReverseGeocodeParams,
    options: ReverseOptions,
    *,
    cache: CacheConfig | None = None,
    rate_limit: RateLimitConfig | None = None,
    retry: RetryConfig | None = None,
) -> Any:
    """Find the address of the OSM object closest to a coordinate.

    Nominatim returns exactly one result. Coordinates outside its data
    coverage produce an error payload rather than an empty list.

    Args:
        fetcher: Fetcher to issue the request through
        params: Latitude and longitude
        options: Output format and reverse options
        cache: Per-call cache overrides
        rate_limit: Per-call rate limit overrides
        retry: Per-call retry overrides

    Returns:
        Parsed result (JSON value, or raw XML text)
    """
    return await fetcher.fetch(
        REVERSE_ENDPOINT,
        [*params.query_items(), *options.query_items()],
        cache=cache,
        rate_limit=rate_limit,
        retry=retry,
    )
