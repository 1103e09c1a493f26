"""Shared fixtures: deterministic time and sleeping."""

import pytest

from simple_nominatim.core.config import CacheConfig, RateLimitConfig, RetryConfig


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep that records delays instead of waiting.

    When bound to a clock, each sleep advances it by the requested delay.
    """

    def __init__(self, clock: FakeClock | None = None):
        self.clock = clock
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.clock is not None:
            self.clock.advance(seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def no_throttle():
    return RateLimitConfig(enabled=False)


@pytest.fixture
def fast_retry():
    """Retries without jitter; waits are recorded, never slept."""
    return RetryConfig(max_attempts=3, initial_delay=10, max_delay=100, use_jitter=False)


@pytest.fixture
def no_cache():
    return CacheConfig(enabled=False)
