"""
Service status API operation.

See https://nominatim.org/release-docs/develop/api/Status/
"""

from __future__ import annotations

from typing import Any

from simple_nominatim.core.config import CacheConfig, RateLimitConfig, RetryConfig
from simple_nominatim.core.fetch import DataFetcher

from .options import StatusOptions

STATUS_ENDPOINT = "status"


async def service_status(
    fetcher: DataFetcher,
    options: StatusOptions | None = None,
    *,
    cache: CacheConfig | None = None,
    rate_limit: RateLimitConfig | None = None,
    retry: RetryConfig | None = None,
) -> Any:
    """Report on the state of the service and its database.

    With ``format=text`` a healthy service answers ``"OK"`` (and HTTP 500
    otherwise). With ``format=json`` the answer is always HTTP 200 and the
    ``status`` field is 0 on success, 700+ on failure.
    """
    options = options or StatusOptions()
    return await fetcher.fetch(
        STATUS_ENDPOINT,
        options.query_items(),
        cache=cache,
        rate_limit=rate_limit,
        retry=retry,
    )
