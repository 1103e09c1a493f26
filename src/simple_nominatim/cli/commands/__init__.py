"""CLI command modules."""

from . import config, reverse, search, status

__all__ = [
    "config",
    "reverse",
    "search",
    "status",
]
