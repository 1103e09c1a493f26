"""
Query string serialization.

Type-to-string rules for every value sent to Nominatim:

- ``None``: parameter omitted entirely
- ``bool``: ``"1"`` / ``"0"``
- ``Enum``: its value, serialized by these same rules
- ``int``: decimal digits
- ``float``: shortest round-tripping representation (``51.5074``)
- ``str``: unchanged
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Iterable, Mapping, Union

import httpx

QueryValue = Union[str, int, float, bool, Enum, None]
QueryInput = Union[
    httpx.QueryParams,
    Mapping[str, QueryValue],
    Iterable[tuple[str, QueryValue]],
    None,
]


def serialize_value(value: Any) -> str | None:
    """Convert a parameter value to its wire form, or None to omit it."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return serialize_value(value.value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot serialize non-finite number: {value}")
        return repr(value)
    if isinstance(value, str):
        return value
    raise TypeError(f"Unsupported query parameter type: {type(value).__name__}")


def build_query_params(params: QueryInput) -> httpx.QueryParams:
    """Build an ordered multi-valued query from mappings or pairs.

    Insertion order is preserved and absent values are dropped.
    """
    if params is None:
        return httpx.QueryParams()
    if isinstance(params, httpx.QueryParams):
        return params

    items = params.items() if isinstance(params, Mapping) else params
    pairs: list[tuple[str, str]] = []
    for key, value in items:
        serialized = serialize_value(value)
        if serialized is not None:
            pairs.append((key, serialized))
    return httpx.QueryParams(pairs)
