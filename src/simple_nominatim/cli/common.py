"""
Helpers shared by CLI commands: resilience flags, output and error display.
"""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator, Optional

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console

from simple_nominatim.core.api import NominatimClient
from simple_nominatim.core.config import (
    CacheConfig,
    ClientConfig,
    RateLimitConfig,
    RetryConfig,
)
from simple_nominatim.core.fetch import HTTPStatusError, ResponseParseError

console = Console()
err_console = Console(stderr=True)


# =============================================================================
# Shared options
# =============================================================================

NO_CACHE = typer.Option(False, "--no-cache", help="Disable response caching")
CACHE_TTL = typer.Option(None, "--cache-ttl", help="Cache time-to-live in milliseconds")
CACHE_MAX_SIZE = typer.Option(None, "--cache-max-size", help="Maximum number of cached entries")
NO_RATE_LIMIT = typer.Option(False, "--no-rate-limit", help="Disable rate limiting")
RATE_LIMIT = typer.Option(None, "--rate-limit", help="Maximum number of requests per interval")
RATE_LIMIT_INTERVAL = typer.Option(
    None, "--rate-limit-interval", help="Rate limit interval in milliseconds"
)
NO_RETRY = typer.Option(False, "--no-retry", help="Disable retries on failure")
RETRY_MAX_ATTEMPTS = typer.Option(
    None, "--retry-max-attempts", help="Maximum number of attempts, the first one included"
)
RETRY_INITIAL_DELAY = typer.Option(
    None, "--retry-initial-delay", help="Delay before the first retry in milliseconds"
)

EMAIL = typer.Option(
    None, "--email", "-e", help="Contact email, expected when making large numbers of requests"
)


def build_cache_config(
    no_cache: bool, ttl: Optional[int], max_size: Optional[int]
) -> CacheConfig | None:
    """Cache overrides from flags, or None when no flag was given."""
    updates: dict[str, Any] = {}
    if no_cache:
        updates["enabled"] = False
    if ttl is not None:
        updates["ttl"] = ttl
    if max_size is not None:
        updates["max_size"] = max_size
    return CacheConfig(**updates) if updates else None


def build_rate_limit_config(
    no_rate_limit: bool, limit: Optional[int], interval: Optional[int]
) -> RateLimitConfig | None:
    """Rate limit overrides from flags, or None when no flag was given."""
    updates: dict[str, Any] = {}
    if no_rate_limit:
        updates["enabled"] = False
    if limit is not None:
        updates["limit"] = limit
    if interval is not None:
        updates["interval"] = interval
    return RateLimitConfig(**updates) if updates else None


def build_retry_config(
    no_retry: bool, max_attempts: Optional[int], initial_delay: Optional[int]
) -> RetryConfig | None:
    """Retry overrides from flags, or None when no flag was given."""
    updates: dict[str, Any] = {}
    if no_retry:
        updates["enabled"] = False
    if max_attempts is not None:
        updates["max_attempts"] = max_attempts
    if initial_delay is not None:
        updates["initial_delay"] = initial_delay
    return RetryConfig(**updates) if updates else None


# =============================================================================
# Errors
# =============================================================================


def describe_error(exc: BaseException) -> str:
    """User-facing message that tells the failure classes apart."""
    if isinstance(exc, HTTPStatusError):
        status = f"HTTP {exc.status_code} {exc.reason_phrase}".strip()
        if exc.status_code == 429:
            return f"Rate limit exceeded ({status}). Slow down and try again later."
        if exc.status_code >= 500:
            return f"Nominatim service unavailable ({status}). Try again later."
        return f"Request rejected ({status}). Check the parameters."
    if isinstance(exc, ResponseParseError):
        return f"Invalid response from Nominatim: {exc}"
    if isinstance(exc, httpx.TransportError):
        return f"Network error: {exc or type(exc).__name__}"
    return str(exc)


@contextmanager
def reported_validation_errors() -> Iterator[None]:
    """Print pydantic validation issues and exit with status 1."""
    try:
        yield
    except ValidationError as e:
        err_console.print("[red]Validation error:[/red]")
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"]) or "input"
            err_console.print(f"  - {loc}: {error['msg']}", highlight=False)
        raise typer.Exit(1)


# =============================================================================
# Execution and output
# =============================================================================


def print_result(result: Any) -> None:
    """Print JSON results pretty, text and XML bodies untouched."""
    if isinstance(result, str):
        console.out(result, highlight=False)
    else:
        console.print_json(data=result)


def run_request(
    ctx: typer.Context,
    call: Callable[[NominatimClient], Awaitable[Any]],
) -> None:
    """Run one API call with a fresh client and print the outcome."""
    config: ClientConfig = ctx.obj if isinstance(ctx.obj, ClientConfig) else ClientConfig()

    async def _run() -> Any:
        async with NominatimClient(config) as client:
            return await call(client)

    try:
        result = asyncio.run(_run())
    except (HTTPStatusError, ResponseParseError, httpx.TransportError) as e:
        err_console.print(f"[red]Error:[/red] {describe_error(e)}", highlight=False)
        raise typer.Exit(1)

    print_result(result)
