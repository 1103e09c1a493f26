"""Configuration loading and validation."""

from .models import (
    DEFAULT_BASE_URL,
    DEFAULT_RETRYABLE_STATUS_CODES,
    DEFAULT_USER_AGENT,
    CacheConfig,
    ClientConfig,
    LoggingConfig,
    RateLimitConfig,
    RetryConfig,
    merge_config,
)
from .loader import ConfigError, load_client_config

__all__ = [
    # Defaults
    "DEFAULT_BASE_URL",
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "DEFAULT_USER_AGENT",
    # Config models
    "CacheConfig",
    "ClientConfig",
    "LoggingConfig",
    "RateLimitConfig",
    "RetryConfig",
    "merge_config",
    # Loaders
    "ConfigError",
    "load_client_config",
]
