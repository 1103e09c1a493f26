"""
Pydantic configuration models for Simple Nominatim.

These models provide type-safe configuration with validation for:
- Response caching
- Request rate limiting
- Retry with exponential backoff
- Client and logging settings

All durations are expressed in milliseconds, except the HTTP timeout.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from simple_nominatim import __version__


DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = f"simple-nominatim/{__version__}"

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


# =============================================================================
# Cache Configuration
# =============================================================================


class CacheConfig(BaseModel):
    """Response cache settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(
        default=True,
        description="Serve repeated identical requests from memory",
    )
    ttl: int = Field(
        default=300_000,
        ge=0,
        description="Time-to-live for cached entries in milliseconds",
    )
    max_size: int = Field(
        default=500,
        ge=0,
        description="Maximum number of cached entries",
    )


# =============================================================================
# Rate Limit Configuration
# =============================================================================


class RateLimitConfig(BaseModel):
    """Request throttling settings.

    The defaults follow the OSM Foundation usage policy of at most one
    request per second against the public Nominatim instance.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(
        default=True,
        description="Throttle outgoing requests",
    )
    limit: int = Field(
        default=1,
        ge=1,
        description="Maximum number of requests started per interval",
    )
    interval: int = Field(
        default=1000,
        ge=0,
        description="Throttle window in milliseconds",
    )
    strict: bool = Field(
        default=True,
        description="Forbid bursting unused capacity from earlier windows",
    )


# =============================================================================
# Retry Configuration
# =============================================================================


class RetryConfig(BaseModel):
    """Retry with exponential backoff settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(
        default=True,
        description="Retry transient failures",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Total attempts, including the first one",
    )
    initial_delay: int = Field(
        default=1000,
        ge=0,
        description="Delay before the first retry in milliseconds",
    )
    max_delay: int = Field(
        default=10_000,
        ge=0,
        description="Upper bound for a single backoff delay in milliseconds",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Exponential backoff multiplier",
    )
    use_jitter: bool = Field(
        default=True,
        description="Randomize each delay between 50% and 150% of its value",
    )
    retryable_status_codes: frozenset[int] = Field(
        default=DEFAULT_RETRYABLE_STATUS_CODES,
        description="HTTP status codes that trigger a retry",
    )

    @field_validator("retryable_status_codes")
    @classmethod
    def status_codes_in_range(cls, v: frozenset[int]) -> frozenset[int]:
        """Reject values that cannot be HTTP status codes."""
        invalid = sorted(code for code in v if not 100 <= code <= 599)
        if invalid:
            raise ValueError(f"Invalid HTTP status codes: {invalid}")
        return v


# =============================================================================
# Client Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="WARNING",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level",
    )
    file: str | None = Field(
        default=None,
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ClientConfig(BaseModel):
    """Top-level client configuration (nominatim.yaml)."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Origin of the Nominatim instance",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent header identifying this client",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300.0,
        description="HTTP request timeout in seconds",
    )
    email: str | None = Field(
        default=None,
        description="Contact email sent with every search/reverse request",
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the origin so endpoint paths join with a single slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")


# =============================================================================
# Overrides
# =============================================================================


ConfigT = TypeVar("ConfigT", CacheConfig, RateLimitConfig, RetryConfig)


def merge_config(base: ConfigT, override: ConfigT | None) -> ConfigT:
    """Layer the explicitly set fields of ``override`` on top of ``base``.

    Fields the caller never set on ``override`` keep the value from
    ``base``, so ``RetryConfig(enabled=False)`` only turns retries off.
    """
    if override is None:
        return base
    return base.model_copy(update=override.model_dump(exclude_unset=True))
