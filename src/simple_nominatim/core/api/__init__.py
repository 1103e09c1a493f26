"""Nominatim API operations and client."""

from .client import NominatimClient
from .options import (
    FeatureType,
    FreeFormSearchParams,
    OutputFormat,
    RequestOptions,
    ReverseGeocodeParams,
    ReverseOptions,
    SearchOptions,
    StatusFormat,
    StatusOptions,
    StructuredSearchParams,
)
from .reverse import reverse_geocode
from .search import free_form_search, structured_search
from .status import service_status

__all__ = [
    # Client
    "NominatimClient",
    # Operations
    "free_form_search",
    "structured_search",
    "reverse_geocode",
    "service_status",
    # Enums
    "OutputFormat",
    "StatusFormat",
    "FeatureType",
    # Options and params
    "RequestOptions",
    "SearchOptions",
    "ReverseOptions",
    "StatusOptions",
    "FreeFormSearchParams",
    "StructuredSearchParams",
    "ReverseGeocodeParams",
]
