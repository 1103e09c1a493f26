"""
Pydantic models for Nominatim request parameters and options.

Options are split into a fixed set of well-known fields and an explicit
``extra_params`` map for provider-specific query parameters. Both are
validated when the model is constructed.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enums
# =============================================================================


class OutputFormat(str, Enum):
    """Response formats for search and reverse requests."""

    XML = "xml"
    JSON = "json"
    JSONV2 = "jsonv2"
    GEOJSON = "geojson"
    GEOCODEJSON = "geocodejson"


class StatusFormat(str, Enum):
    """Response formats for the status endpoint."""

    TEXT = "text"
    JSON = "json"


class FeatureType(str, Enum):
    """Fine-grained selection of places from the address layer."""

    COUNTRY = "country"
    STATE = "state"
    CITY = "city"
    SETTLEMENT = "settlement"


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Query names taken by request parameters; extension params may not reuse them
REQUEST_PARAM_NAMES = frozenset(
    {"q", "amenity", "street", "city", "county", "state", "country", "postalcode", "lat", "lon"}
)

ExtraValue = Union[bool, int, float, str]


# =============================================================================
# Options
# =============================================================================


class RequestOptions(BaseModel):
    """Options shared by search and reverse requests."""

    model_config = ConfigDict(frozen=True)

    # Field name -> query parameter name, where they differ
    WIRE_NAMES: ClassVar[dict[str, str]] = {"accept_language": "accept-language"}

    email: str | None = Field(
        default=None,
        description="Contact address, required by policy for large numbers of requests",
    )
    addressdetails: bool | None = Field(default=None, description="Include an address breakdown")
    extratags: bool | None = Field(default=None, description="Include additional database tags")
    namedetails: bool | None = Field(default=None, description="Include the full list of names")
    entrances: bool | None = Field(default=None, description="Include tagged entrances")
    accept_language: str | None = Field(default=None, description="Preferred language order")
    layer: str | None = Field(default=None, description="Comma-separated place themes")
    polygon_geojson: bool | None = Field(default=None, description="Geometry as GeoJSON")
    polygon_kml: bool | None = Field(default=None, description="Geometry as KML")
    polygon_svg: bool | None = Field(default=None, description="Geometry as SVG")
    polygon_text: bool | None = Field(default=None, description="Geometry as WKT")
    polygon_threshold: float | None = Field(
        default=None,
        ge=0,
        description="Simplification tolerance in degrees",
    )
    json_callback: str | None = Field(default=None, description="JSONP callback name")
    debug: bool | None = Field(default=None, description="Output developer debug information")

    extra_params: dict[str, ExtraValue] = Field(
        default_factory=dict,
        description="Additional provider-specific query parameters",
    )

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str | None) -> str | None:
        if v is not None and not EMAIL_PATTERN.match(v):
            raise ValueError("Email must be a valid email address")
        return v

    @model_validator(mode="after")
    def extra_params_do_not_shadow(self) -> "RequestOptions":
        """Reject extension params that collide with typed fields."""
        reserved = REQUEST_PARAM_NAMES | {
            self.wire_name(name) for name in type(self).model_fields if name != "extra_params"
        }
        for key in self.extra_params:
            if not key or not key.strip():
                raise ValueError("extra_params keys must be non-empty")
            if key in reserved:
                raise ValueError(f"extra_params key '{key}' shadows a built-in parameter")
        return self

    @classmethod
    def wire_name(cls, field_name: str) -> str:
        return cls.WIRE_NAMES.get(field_name, field_name)

    def query_items(self) -> list[tuple[str, Any]]:
        """Query pairs for this object; absent values are kept as None."""
        items = [
            (self.wire_name(name), getattr(self, name))
            for name in type(self).model_fields
            if name != "extra_params"
        ]
        items.extend(self.extra_params.items())
        return items


class SearchOptions(RequestOptions):
    """Options for free-form and structured search."""

    format: OutputFormat = Field(description="Response format")
    limit: int | None = Field(
        default=None,
        ge=1,
        le=40,
        description="Maximum number of results (Nominatim caps this at 40)",
    )
    countrycodes: str | None = Field(default=None, description="Comma-separated ISO 3166-1 codes")
    featuretype: FeatureType | None = Field(default=None, description="Address layer selection")
    exclude_place_ids: str | None = Field(default=None, description="Comma-separated place_ids to skip")
    viewbox: str | None = Field(default=None, description="Focus box as x1,y1,x2,y2")
    bounded: bool | None = Field(default=None, description="Restrict results to the viewbox")
    dedupe: bool | None = Field(default=None, description="Deduplicate results")


class ReverseOptions(RequestOptions):
    """Options for reverse geocoding."""

    format: OutputFormat = Field(description="Response format")
    zoom: int | None = Field(
        default=None,
        ge=0,
        le=18,
        description="Level of detail required for the address",
    )


class StatusOptions(BaseModel):
    """Options for the status endpoint."""

    model_config = ConfigDict(frozen=True)

    format: StatusFormat = Field(default=StatusFormat.TEXT, description="Response format")

    def query_items(self) -> list[tuple[str, Any]]:
        return [("format", self.format)]


# =============================================================================
# Request parameters
# =============================================================================


class FreeFormSearchParams(BaseModel):
    """A single free-text query."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    query: str = Field(min_length=1, description="Free-form query string")

    def query_items(self) -> list[tuple[str, Any]]:
        return [("q", self.query)]


class StructuredSearchParams(BaseModel):
    """Address components for a structured search."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    amenity: str | None = Field(default=None, description="Name or type of POI")
    street: str | None = Field(default=None, description="House number and street name")
    city: str | None = None
    county: str | None = None
    state: str | None = None
    country: str | None = None
    postalcode: str | None = None

    @model_validator(mode="after")
    def at_least_one_component(self) -> "StructuredSearchParams":
        if not any(self.query_value(name) for name in type(self).model_fields):
            raise ValueError("At least one address component is required")
        return self

    def query_value(self, name: str) -> str | None:
        # empty strings are treated as absent
        return getattr(self, name) or None

    def query_items(self) -> list[tuple[str, Any]]:
        return [(name, self.query_value(name)) for name in type(self).model_fields]


class ReverseGeocodeParams(BaseModel):
    """Coordinates to reverse geocode."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(ge=-180, le=180, description="Longitude in degrees")

    def query_items(self) -> list[tuple[str, Any]]:
        return [("lat", self.latitude), ("lon", self.longitude)]
