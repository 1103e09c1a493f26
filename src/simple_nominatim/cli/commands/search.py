"""
Search commands.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from simple_nominatim.core.api import (
    FeatureType,
    FreeFormSearchParams,
    OutputFormat,
    SearchOptions,
    StructuredSearchParams,
)

from ..common import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    EMAIL,
    NO_CACHE,
    NO_RATE_LIMIT,
    NO_RETRY,
    RATE_LIMIT,
    RATE_LIMIT_INTERVAL,
    RETRY_INITIAL_DELAY,
    RETRY_MAX_ATTEMPTS,
    build_cache_config,
    build_rate_limit_config,
    build_retry_config,
    reported_validation_errors,
    run_request,
)

app = typer.Typer(
    help="Search by free-form query or by address components",
    no_args_is_help=True,
)

# Options common to both search commands
FORMAT = typer.Option(..., "--format", "-f", help="Output format")
LIMIT = typer.Option(None, "--limit", help="Maximum number of results (1-40)")
ADDRESSDETAILS = typer.Option(
    None, "--addressdetails/--no-addressdetails", help="Include an address breakdown"
)
EXTRATAGS = typer.Option(None, "--extratags/--no-extratags", help="Include extra database tags")
NAMEDETAILS = typer.Option(
    None, "--namedetails/--no-namedetails", help="Include the full list of names"
)
ENTRANCES = typer.Option(None, "--entrances/--no-entrances", help="Include tagged entrances")
ACCEPT_LANGUAGE = typer.Option(None, "--accept-language", help="Preferred language order")
COUNTRYCODES = typer.Option(
    None, "--countrycodes", help="Limit results to countries, e.g. 'gb,de'"
)
LAYER = typer.Option(
    None, "--layer", help="Place themes: address, poi, railway, natural, manmade"
)
FEATURETYPE = typer.Option(None, "--featuretype", help="Address layer selection")
EXCLUDE_PLACE_IDS = typer.Option(
    None, "--exclude-place-ids", help="Comma-separated place_ids to skip"
)
VIEWBOX = typer.Option(None, "--viewbox", help="Focus box as x1,y1,x2,y2")
BOUNDED = typer.Option(None, "--bounded/--no-bounded", help="Restrict results to the viewbox")
POLYGON_GEOJSON = typer.Option(None, "--polygon-geojson/--no-polygon-geojson", help="Geometry as GeoJSON")
POLYGON_KML = typer.Option(None, "--polygon-kml/--no-polygon-kml", help="Geometry as KML")
POLYGON_SVG = typer.Option(None, "--polygon-svg/--no-polygon-svg", help="Geometry as SVG")
POLYGON_TEXT = typer.Option(None, "--polygon-text/--no-polygon-text", help="Geometry as WKT")
POLYGON_THRESHOLD = typer.Option(
    None, "--polygon-threshold", help="Geometry simplification tolerance in degrees"
)
JSON_CALLBACK = typer.Option(None, "--json-callback", help="JSONP callback name")
DEDUPE = typer.Option(None, "--dedupe/--no-dedupe", help="Deduplicate results")
DEBUG = typer.Option(None, "--debug/--no-debug", help="Output developer debug information")


def _search_options(
    output_format: OutputFormat,
    email: Optional[str],
    limit: Optional[int],
    addressdetails: Optional[bool],
    extratags: Optional[bool],
    namedetails: Optional[bool],
    entrances: Optional[bool],
    accept_language: Optional[str],
    countrycodes: Optional[str],
    layer: Optional[str],
    featuretype: Optional[FeatureType],
    exclude_place_ids: Optional[str],
    viewbox: Optional[str],
    bounded: Optional[bool],
    polygon_geojson: Optional[bool],
    polygon_kml: Optional[bool],
    polygon_svg: Optional[bool],
    polygon_text: Optional[bool],
    polygon_threshold: Optional[float],
    json_callback: Optional[str],
    dedupe: Optional[bool],
    debug: Optional[bool],
) -> SearchOptions:
    return SearchOptions(
        format=output_format,
        email=email,
        limit=limit,
        addressdetails=addressdetails,
        extratags=extratags,
        namedetails=namedetails,
        entrances=entrances,
        accept_language=accept_language,
        countrycodes=countrycodes,
        layer=layer,
        featuretype=featuretype,
        exclude_place_ids=exclude_place_ids,
        viewbox=viewbox,
        bounded=bounded,
        polygon_geojson=polygon_geojson,
        polygon_kml=polygon_kml,
        polygon_svg=polygon_svg,
        polygon_text=polygon_text,
        polygon_threshold=polygon_threshold,
        json_callback=json_callback,
        dedupe=dedupe,
        debug=debug,
    )


@app.command("free-form")
def free_form(
    ctx: typer.Context,
    query: str = typer.Option(..., "--query", "-q", help="Free-form query string"),
    output_format: OutputFormat = FORMAT,
    email: Optional[str] = EMAIL,
    limit: Optional[int] = LIMIT,
    addressdetails: Optional[bool] = ADDRESSDETAILS,
    extratags: Optional[bool] = EXTRATAGS,
    namedetails: Optional[bool] = NAMEDETAILS,
    entrances: Optional[bool] = ENTRANCES,
    accept_language: Optional[str] = ACCEPT_LANGUAGE,
    countrycodes: Optional[str] = COUNTRYCODES,
    layer: Optional[str] = LAYER,
    featuretype: Optional[FeatureType] = FEATURETYPE,
    exclude_place_ids: Optional[str] = EXCLUDE_PLACE_IDS,
    viewbox: Optional[str] = VIEWBOX,
    bounded: Optional[bool] = BOUNDED,
    polygon_geojson: Optional[bool] = POLYGON_GEOJSON,
    polygon_kml: Optional[bool] = POLYGON_KML,
    polygon_svg: Optional[bool] = POLYGON_SVG,
    polygon_text: Optional[bool] = POLYGON_TEXT,
    polygon_threshold: Optional[float] = POLYGON_THRESHOLD,
    json_callback: Optional[str] = JSON_CALLBACK,
    dedupe: Optional[bool] = DEDUPE,
    debug: Optional[bool] = DEBUG,
    no_cache: bool = NO_CACHE,
    cache_ttl: Optional[int] = CACHE_TTL,
    cache_max_size: Optional[int] = CACHE_MAX_SIZE,
    no_rate_limit: bool = NO_RATE_LIMIT,
    rate_limit: Optional[int] = RATE_LIMIT,
    rate_limit_interval: Optional[int] = RATE_LIMIT_INTERVAL,
    no_retry: bool = NO_RETRY,
    retry_max_attempts: Optional[int] = RETRY_MAX_ATTEMPTS,
    retry_initial_delay: Optional[int] = RETRY_INITIAL_DELAY,
) -> None:
    """Search with a free-form query string."""
    with reported_validation_errors():
        params = FreeFormSearchParams(query=query)
        options = _search_options(
            output_format, email, limit, addressdetails, extratags, namedetails,
            entrances, accept_language, countrycodes, layer, featuretype,
            exclude_place_ids, viewbox, bounded, polygon_geojson, polygon_kml,
            polygon_svg, polygon_text, polygon_threshold, json_callback, dedupe, debug,
        )
        overrides: dict[str, Any] = {
            "cache": build_cache_config(no_cache, cache_ttl, cache_max_size),
            "rate_limit": build_rate_limit_config(no_rate_limit, rate_limit, rate_limit_interval),
            "retry": build_retry_config(no_retry, retry_max_attempts, retry_initial_delay),
        }

    run_request(ctx, lambda client: client.search(params, options, **overrides))


@app.command("structured")
def structured(
    ctx: typer.Context,
    amenity: Optional[str] = typer.Option(None, "--amenity", help="Name or type of POI"),
    street: Optional[str] = typer.Option(None, "--street", help="House number and street name"),
    city: Optional[str] = typer.Option(None, "--city", help="City name"),
    county: Optional[str] = typer.Option(None, "--county", help="County name"),
    state: Optional[str] = typer.Option(None, "--state", help="State name"),
    country: str = typer.Option(..., "--country", help="Country name"),
    postalcode: Optional[str] = typer.Option(None, "--postal-code", help="Postal code"),
    output_format: OutputFormat = FORMAT,
    email: Optional[str] = EMAIL,
    limit: Optional[int] = LIMIT,
    addressdetails: Optional[bool] = ADDRESSDETAILS,
    extratags: Optional[bool] = EXTRATAGS,
    namedetails: Optional[bool] = NAMEDETAILS,
    entrances: Optional[bool] = ENTRANCES,
    accept_language: Optional[str] = ACCEPT_LANGUAGE,
    countrycodes: Optional[str] = COUNTRYCODES,
    layer: Optional[str] = LAYER,
    featuretype: Optional[FeatureType] = FEATURETYPE,
    exclude_place_ids: Optional[str] = EXCLUDE_PLACE_IDS,
    viewbox: Optional[str] = VIEWBOX,
    bounded: Optional[bool] = BOUNDED,
    polygon_geojson: Optional[bool] = POLYGON_GEOJSON,
    polygon_kml: Optional[bool] = POLYGON_KML,
    polygon_svg: Optional[bool] = POLYGON_SVG,
    polygon_text: Optional[bool] = POLYGON_TEXT,
    polygon_threshold: Optional[float] = POLYGON_THRESHOLD,
    json_callback: Optional[str] = JSON_CALLBACK,
    dedupe: Optional[bool] = DEDUPE,
    debug: Optional[bool] = DEBUG,
    no_cache: bool = NO_CACHE,
    cache_ttl: Optional[int] = CACHE_TTL,
    cache_max_size: Optional[int] = CACHE_MAX_SIZE,
    no_rate_limit: bool = NO_RATE_LIMIT,
    rate_limit: Optional[int] = RATE_LIMIT,
    rate_limit_interval: Optional[int] = RATE_LIMIT_INTERVAL,
    no_retry: bool = NO_RETRY,
    retry_max_attempts: Optional[int] = RETRY_MAX_ATTEMPTS,
    retry_initial_delay: Optional[int] = RETRY_INITIAL_DELAY,
) -> None:
    """Search with separate address components."""
    with reported_validation_errors():
        params = StructuredSearchParams(
            amenity=amenity,
            street=street,
            city=city,
            county=county,
            state=state,
            country=country,
            postalcode=postalcode,
        )
        options = _search_options(
            output_format, email, limit, addressdetails, extratags, namedetails,
            entrances, accept_language, countrycodes, layer, featuretype,
            exclude_place_ids, viewbox, bounded, polygon_geojson, polygon_kml,
            polygon_svg, polygon_text, polygon_threshold, json_callback, dedupe, debug,
        )
        overrides: dict[str, Any] = {
            "cache": build_cache_config(no_cache, cache_ttl, cache_max_size),
            "rate_limit": build_rate_limit_config(no_rate_limit, rate_limit, rate_limit_interval),
            "retry": build_retry_config(no_retry, retry_max_attempts, retry_initial_delay),
        }

    run_request(ctx, lambda client: client.structured_search(params, options, **overrides))
