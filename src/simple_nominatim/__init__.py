"""
Simple Nominatim - Async client and CLI for the OpenStreetMap Nominatim API.

Wraps free-form search, structured search, reverse geocoding and the
service status endpoint behind a shared cache, rate limiter and retry policy.
"""

__version__ = "0.1.0"
__app_name__ = "simple-nominatim"
