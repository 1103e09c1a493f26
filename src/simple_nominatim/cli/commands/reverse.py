"""
Reverse geocoding commands.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from simple_nominatim.core.api import OutputFormat, ReverseGeocodeParams, ReverseOptions

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

app = typer.Typer(help="Look up the address of a coordinate", no_args_is_help=True)


@app.command("geocode")
def geocode(
    ctx: typer.Context,
    latitude: float = typer.Option(..., "--latitude", "--lat", help="Latitude (-90 to 90)"),
    longitude: float = typer.Option(..., "--longitude", "--lon", help="Longitude (-180 to 180)"),
    output_format: OutputFormat = typer.Option(..., "--format", "-f", help="Output format"),
    zoom: Optional[int] = typer.Option(None, "--zoom", "-z", help="Address detail level (0-18)"),
    email: Optional[str] = EMAIL,
    addressdetails: Optional[bool] = typer.Option(
        None, "--addressdetails/--no-addressdetails", help="Include an address breakdown"
    ),
    extratags: Optional[bool] = typer.Option(
        None, "--extratags/--no-extratags", help="Include extra database tags"
    ),
    namedetails: Optional[bool] = typer.Option(
        None, "--namedetails/--no-namedetails", help="Include the full list of names"
    ),
    entrances: Optional[bool] = typer.Option(
        None, "--entrances/--no-entrances", help="Include tagged entrances"
    ),
    accept_language: Optional[str] = typer.Option(
        None, "--accept-language", help="Preferred language order"
    ),
    layer: Optional[str] = typer.Option(None, "--layer", help="Place themes to return"),
    polygon_geojson: Optional[bool] = typer.Option(
        None, "--polygon-geojson/--no-polygon-geojson", help="Geometry as GeoJSON"
    ),
    polygon_kml: Optional[bool] = typer.Option(
        None, "--polygon-kml/--no-polygon-kml", help="Geometry as KML"
    ),
    polygon_svg: Optional[bool] = typer.Option(
        None, "--polygon-svg/--no-polygon-svg", help="Geometry as SVG"
    ),
    polygon_text: Optional[bool] = typer.Option(
        None, "--polygon-text/--no-polygon-text", help="Geometry as WKT"
    ),
    polygon_threshold: Optional[float] = typer.Option(
        None, "--polygon-threshold", help="Geometry simplification tolerance in degrees"
    ),
    json_callback: Optional[str] = typer.Option(None, "--json-callback", help="JSONP callback name"),
    debug: Optional[bool] = typer.Option(None, "--debug/--no-debug", help="Output debug information"),
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
    """Reverse geocode a latitude/longitude pair."""
    with reported_validation_errors():
        params = ReverseGeocodeParams(latitude=latitude, longitude=longitude)
        options = ReverseOptions(
            format=output_format,
            zoom=zoom,
            email=email,
            addressdetails=addressdetails,
            extratags=extratags,
            namedetails=namedetails,
            entrances=entrances,
            accept_language=accept_language,
            layer=layer,
            polygon_geojson=polygon_geojson,
            polygon_kml=polygon_kml,
            polygon_svg=polygon_svg,
            polygon_text=polygon_text,
            polygon_threshold=polygon_threshold,
            json_callback=json_callback,
            debug=debug,
        )
        overrides: dict[str, Any] = {
            "cache": build_cache_config(no_cache, cache_ttl, cache_max_size),
            "rate_limit": build_rate_limit_config(no_rate_limit, rate_limit, rate_limit_interval),
            "retry": build_retry_config(no_retry, retry_max_attempts, retry_initial_delay),
        }

    run_request(ctx, lambda client: client.reverse(params, options, **overrides))
