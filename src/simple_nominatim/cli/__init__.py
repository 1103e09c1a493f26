"""Simple Nominatim command line interface."""
