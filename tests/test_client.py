"""Tests for NominatimClient and the API operations."""

import httpx
import pytest
import respx

from simple_nominatim.core.api import (
    FreeFormSearchParams,
    NominatimClient,
    OutputFormat,
    ReverseGeocodeParams,
    ReverseOptions,
    SearchOptions,
    StatusFormat,
    StatusOptions,
    StructuredSearchParams,
)
from simple_nominatim.core.config import ClientConfig, RateLimitConfig, RetryConfig

BASE_URL = "https://nominatim.example.org"


@pytest.fixture
def config():
    return ClientConfig(
        base_url=BASE_URL,
        user_agent="test-agent/1.0",
        rate_limit=RateLimitConfig(enabled=False),
        retry=RetryConfig(use_jitter=False),
    )


class TestSearch:
    """Tests for free-form and structured search."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_free_form_defaults_to_jsonv2(self, config, sleep):
        route = respx.get(f"{BASE_URL}/search").mock(
            return_value=httpx.Response(200, json=[{"place_id": 1}])
        )

        async with NominatimClient(config, sleep=sleep) as client:
            result = await client.search(FreeFormSearchParams(query="Paris"))

        assert result == [{"place_id": 1}]
        params = route.calls.last.request.url.params
        assert params["q"] == "Paris"
        assert params["format"] == "jsonv2"
        assert route.calls.last.request.headers["User-Agent"] == "test-agent/1.0"

    @respx.mock
    @pytest.mark.asyncio
    async def test_structured_search(self, config, sleep):
        route = respx.get(f"{BASE_URL}/search").mock(return_value=httpx.Response(200, json=[]))

        async with NominatimClient(config, sleep=sleep) as client:
            await client.structured_search(
                StructuredSearchParams(city="London", country="United Kingdom"),
                SearchOptions(format=OutputFormat.JSON, limit=3),
            )

        params = route.calls.last.request.url.params
        assert params["city"] == "London"
        assert params["country"] == "United Kingdom"
        assert params["limit"] == "3"
        assert "street" not in params
        assert "q" not in params

    @respx.mock
    @pytest.mark.asyncio
    async def test_default_email_applied(self, config, sleep):
        route = respx.get(f"{BASE_URL}/search").mock(return_value=httpx.Response(200, json=[]))
        config = config.model_copy(update={"email": "ops@example.com"})

        async with NominatimClient(config, sleep=sleep) as client:
            await client.search(FreeFormSearchParams(query="Paris"))
            await client.search(
                FreeFormSearchParams(query="Rome"),
                SearchOptions(format=OutputFormat.JSON, email="me@example.com"),
            )

        first, second = (call.request.url.params for call in route.calls)
        assert first["email"] == "ops@example.com"
        assert second["email"] == "me@example.com"


class TestReverse:
    """Tests for reverse geocoding."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_reverse(self, config, sleep):
        route = respx.get(f"{BASE_URL}/reverse").mock(
            return_value=httpx.Response(200, json={"place_id": 7})
        )

        async with NominatimClient(config, sleep=sleep) as client:
            result = await client.reverse(
                ReverseGeocodeParams(latitude=51.5074, longitude=-0.1278),
                ReverseOptions(format=OutputFormat.JSON, zoom=18),
            )

        assert result == {"place_id": 7}
        params = route.calls.last.request.url.params
        assert params["lat"] == "51.5074"
        assert params["lon"] == "-0.1278"
        assert params["zoom"] == "18"


class TestStatus:
    """Tests for the status endpoint."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_text_status(self, config, sleep):
        respx.get(f"{BASE_URL}/status").mock(return_value=httpx.Response(200, text="OK"))

        async with NominatimClient(config, sleep=sleep) as client:
            assert await client.status() == "OK"

    @respx.mock
    @pytest.mark.asyncio
    async def test_json_status(self, config, sleep):
        respx.get(f"{BASE_URL}/status").mock(
            return_value=httpx.Response(200, json={"status": 0, "message": "OK"})
        )

        async with NominatimClient(config, sleep=sleep) as client:
            result = await client.status(StatusOptions(format=StatusFormat.JSON))

        assert result == {"status": 0, "message": "OK"}


class TestClientState:
    """Tests for statistics, reset and HTTP client ownership."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_cache_stats_and_reset(self, config, sleep):
        route = respx.get(f"{BASE_URL}/status").mock(return_value=httpx.Response(200, text="OK"))

        async with NominatimClient(config, sleep=sleep) as client:
            await client.status()
            await client.status()
            assert client.cache_stats() == {"hits": 1, "misses": 1, "hit_rate": 0.5, "size": 1}

            client.reset()
            assert client.cache_stats()["size"] == 0
            await client.status()

        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_owned_http_client_closed(self, config):
        client = NominatimClient(config)
        async with client:
            pass
        assert client._http_client.is_closed

    @pytest.mark.asyncio
    async def test_external_http_client_left_open(self, config):
        async with httpx.AsyncClient() as http:
            async with NominatimClient(config, http_client=http):
                pass
            assert not http.is_closed

    @respx.mock
    @pytest.mark.asyncio
    async def test_low_level_fetch(self, config, sleep):
        respx.get(f"{BASE_URL}/details").mock(return_value=httpx.Response(200, json={"ok": True}))

        async with NominatimClient(config, sleep=sleep) as client:
            assert await client.fetch("details", {"place_id": 1, "format": "json"}) == {"ok": True}
