"""
Retry utilities with tenacity.

Re-attempts transient failures with capped exponential backoff and
optional jitter. Network errors and HTTP responses with a retryable
status code are retried; everything else fails on the first attempt.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

from simple_nominatim.core.config import RetryConfig
from simple_nominatim.core.logging import get_logger

from .base import HTTPStatusError

logger = get_logger("retry")

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]
RandomSource = Callable[[], float]


def is_network_error(exc: BaseException) -> bool:
    """Whether the transport failed before any HTTP response arrived."""
    return isinstance(exc, (httpx.TransportError, OSError))


class RetryPolicy:
    """Retry loop for a single logical request.

    ``max_attempts`` counts every attempt, the first one included. When
    attempts run out the last original exception is re-raised as is.
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        sleep: Sleep = asyncio.sleep,
        random_source: RandomSource = random.random,
    ):
        """Initialize retry policy.

        Args:
            config: Retry configuration (defaults apply when omitted)
            sleep: Coroutine used for backoff waits
            random_source: Returns floats in [0, 1) for jitter
        """
        self.config = config or RetryConfig()
        self._sleep = sleep
        self._random = random_source

    def compute_delay(self, attempt: int) -> float:
        """Backoff delay in milliseconds after the given failed attempt.

        ``min(initial_delay * multiplier ** (attempt - 1), max_delay)``,
        scaled by a factor in [0.5, 1.5) when jitter is on and capped
        at ``max_delay`` again.
        """
        cfg = self.config
        delay = min(cfg.initial_delay * cfg.backoff_multiplier ** (attempt - 1), cfg.max_delay)
        if cfg.use_jitter:
            delay = min(delay * (0.5 + self._random()), cfg.max_delay)
        return max(0.0, delay)

    def is_retryable(self, exc: BaseException) -> bool:
        if isinstance(exc, HTTPStatusError):
            return exc.status_code in self.config.retryable_status_codes
        return is_network_error(exc)

    def _wait(self, retry_state: RetryCallState) -> float:
        return self.compute_delay(retry_state.attempt_number) / 1000.0

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "Attempt %d/%d failed (%s), retrying in %.0fms",
            retry_state.attempt_number,
            self.config.max_attempts,
            exc,
            delay * 1000,
            extra={
                "attempt": retry_state.attempt_number,
                "status_code": getattr(exc, "status_code", None),
                "delay_ms": round(delay * 1000),
            },
        )

    async def call(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` under this policy and return its result."""
        if not self.config.enabled:
            return await fn()

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(self.is_retryable),
            before_sleep=self._before_sleep,
            sleep=self._sleep,
            reraise=True,
        ):
            with attempt:
                return await fn()
