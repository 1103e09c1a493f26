"""
Rate limiting utilities.

Bounds how many wrapped coroutines may start within a time window. The
default configuration allows one request per second, as required by the
public Nominatim usage policy.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Any, Awaitable, Callable, TypeVar

from simple_nominatim.core.config import RateLimitConfig
from simple_nominatim.core.logging import get_logger

logger = get_logger("throttle")

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


class RateLimiter:
    """Throttles coroutine start times to ``limit`` per ``interval``.

    Slots are reserved synchronously before the first ``await``, so
    concurrent callers on one event loop never race on the window
    bookkeeping. Each caller then sleeps until its reserved start time.

    Modes:
    - strict: a new start is allowed only once the ``limit``-th previous
      start is at least ``interval`` old; unused capacity never accumulates.
    - windowed: up to ``limit`` starts per fixed window; a full window
      pushes the next start to the beginning of the following window.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize rate limiter.

        Args:
            config: Rate limit configuration (defaults apply when omitted)
            clock: Monotonic time source in seconds
            sleep: Coroutine used to wait for a slot
        """
        self.config = config or RateLimitConfig()
        self._enabled = self.config.enabled
        self._clock = clock
        self._sleep = sleep

        # strict mode: reserved start times of the last `limit` requests
        self._ticks: deque[float] = deque()
        # windowed mode
        self._window_start: float | None = None
        self._window_count = 0

        self._request_count = 0
        self._queued_count = 0

    @property
    def _interval(self) -> float:
        return self.config.interval / 1000.0

    def _strict_delay(self, now: float) -> float:
        if self._ticks and now - self._ticks[-1] > self._interval:
            self._ticks.clear()

        if len(self._ticks) < self.config.limit:
            self._ticks.append(now)
            return 0.0

        # never record a start earlier than the caller can actually begin
        next_start = max(now, self._ticks.popleft() + self._interval)
        self._ticks.append(next_start)
        return next_start - now

    def _windowed_delay(self, now: float) -> float:
        if self._window_start is None or now - self._window_start > self._interval:
            self._window_start = now
            self._window_count = 1
            return 0.0

        if self._window_count < self.config.limit:
            self._window_count += 1
        else:
            self._window_start += self._interval
            self._window_count = 1

        return max(0.0, self._window_start - now)

    def reserve(self) -> float:
        """Reserve the next start slot.

        Returns:
            Seconds the caller must wait before starting
        """
        now = self._clock()
        if self.config.strict:
            return self._strict_delay(now)
        return self._windowed_delay(now)

    async def execute(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` once a slot is available.

        The result or exception of ``fn`` is propagated unchanged. Only
        successful calls count towards ``request_count``.
        """
        if not self._enabled:
            return await fn()

        self._queued_count += 1
        try:
            delay = self.reserve()
            if delay > 0:
                logger.debug(
                    "Rate limited, waiting %.0fms",
                    delay * 1000,
                    extra={"delay_ms": round(delay * 1000)},
                )
                await self._sleep(delay)

            result = await fn()
            self._request_count += 1
            return result
        finally:
            # reset_stats() may have zeroed the counter while we were in flight
            self._queued_count = max(0, self._queued_count - 1)

    def stats(self) -> dict[str, int]:
        """Get rate limiter statistics.

        Returns:
            Dictionary with request_count (completed successfully) and
            queued_count (waiting for a slot or in flight)
        """
        return {
            "request_count": self._request_count,
            "queued_count": self._queued_count,
        }

    def reset_stats(self) -> None:
        """Reset counters. Throttle timing state is kept."""
        self._request_count = 0
        self._queued_count = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable throttling. Disabling resets statistics."""
        self._enabled = enabled
        if not enabled:
            self.reset_stats()
