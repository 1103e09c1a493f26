"""Fetch utilities - caching, throttling, retries and the request pipeline."""

from .base import (
    TEXT_FORMATS,
    HTTPStatusError,
    NominatimError,
    RequestDescriptor,
    ResponseParseError,
)
from .caching import CacheManager, make_cache_key
from .fetcher import DataFetcher
from .query import build_query_params, serialize_value
from .retries import RetryPolicy, is_network_error
from .throttling import RateLimiter

__all__ = [
    # Requests and errors
    "TEXT_FORMATS",
    "RequestDescriptor",
    "NominatimError",
    "HTTPStatusError",
    "ResponseParseError",
    # Resilience
    "CacheManager",
    "make_cache_key",
    "RateLimiter",
    "RetryPolicy",
    "is_network_error",
    # Pipeline
    "DataFetcher",
    "build_query_params",
    "serialize_value",
]
