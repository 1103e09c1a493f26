"""Core library: configuration, request resilience and API operations."""
