"""
Service status commands.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from simple_nominatim.core.api import StatusFormat, StatusOptions

from ..common import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    NO_CACHE,
    NO_RATE_LIMIT,
    NO_RETRY,
    RATE_LIMIT,
    RATE_LIMIT_INTERVAL,
    RETRY_INITIAL_DELAY,
    RETRY_MAX_ATTEMPTS,
    build_cache_config,
    build_rate_limit_config,
    build_retry_config,
    reported_validation_errors,
    run_request,
)

app = typer.Typer(help="Check the Nominatim service", no_args_is_help=True)


@app.command("service")
def service(
    ctx: typer.Context,
    output_format: StatusFormat = typer.Option(
        StatusFormat.TEXT, "--format", "-f", help="Output format"
    ),
    no_cache: bool = NO_CACHE,
    cache_ttl: Optional[int] = CACHE_TTL,
    cache_max_size: Optional[int] = CACHE_MAX_SIZE,
    no_rate_limit: bool = NO_RATE_LIMIT,
    rate_limit: Optional[int] = RATE_LIMIT,
    rate_limit_interval: Optional[int] = RATE_LIMIT_INTERVAL,
    no_retry: bool = NO_RETRY,
    retry_max_attempts: Optional[int] = RETRY_MAX_ATTEMPTS,
    retry_initial_delay: Optional[int] = RETRY_INITIAL_DELAY,
) -> None:
    """Report whether the service and its database are available."""
    with reported_validation_errors():
        options = StatusOptions(format=output_format)
        overrides: dict[str, Any] = {
            "cache": build_cache_config(no_cache, cache_ttl, cache_max_size),
            "rate_limit": build_rate_limit_config(no_rate_limit, rate_limit, rate_limit_interval),
            "retry": build_retry_config(no_retry, retry_max_attempts, retry_initial_delay),
        }

    run_request(ctx, lambda client: client.status(options, **overrides))
