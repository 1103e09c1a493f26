"""
Request descriptor and error types shared by the fetch layer.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx


# Formats whose bodies are returned as raw text instead of parsed JSON
TEXT_FORMATS = frozenset({"text", "xml"})


@dataclass(frozen=True)
class RequestDescriptor:
    """A single Nominatim request: endpoint name plus query parameters.

    Built fresh for every call and never mutated afterwards.
    """

    endpoint: str
    params: httpx.QueryParams

    @property
    def format(self) -> str | None:
        """The requested response format, if any."""
        return self.params.get("format")

    @property
    def expects_text(self) -> bool:
        """Whether the body should be returned as text rather than JSON."""
        return self.format in TEXT_FORMATS


class NominatimError(Exception):
    """Base exception for errors raised by the client."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class HTTPStatusError(NominatimError):
    """The service answered with a non-2xx status code.

    Carries the original status code and reason phrase so callers can tell
    rate limiting, server failures and bad requests apart.
    """

    def __init__(self, status_code: int, reason_phrase: str, url: str | None = None):
        super().__init__(
            f"HTTP error! Status: {status_code}. Text: {reason_phrase}",
            url=url,
            status_code=status_code,
        )
        self.reason_phrase = reason_phrase

    @classmethod
    def from_response(cls, response: httpx.Response) -> "HTTPStatusError":
        return cls(
            response.status_code,
            response.reason_phrase,
            url=str(response.request.url),
        )


class ResponseParseError(NominatimError):
    """A JSON body was expected but could not be decoded."""

    def __init__(self, message: str, url: str | None = None, body: str | None = None):
        super().__init__(message, url=url)
        self.body = body
