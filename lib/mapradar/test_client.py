"""
Unit tests for Mapradar API Client

This module contains unit tests for the MapradarClient class, testing
request building, response decoding and error handling, dood!
"""

import json
import math
from unittest.mock import MagicMock, patch

import httpx
import pytest

from lib.mapradar import (
    APIError,
    AuthenticationError,
    CoordinatesQuery,
    GeoLocation,
    MapradarClient,
    NetworkError,
    NotFoundError,
    RateLimitError,
    SearchQuery,
    SerializationError,
    ServiceType,
)

LOCATION_RESPONSE = {
    "address": "221B Baker Street, London NW1 6XE",
    "latitude": 51.5238,
    "longitude": -0.1586,
    "city": "London",
    "state": "England",
    "country": "United Kingdom",
}

INTELLIGENCE_RESPONSE = {
    "location": LOCATION_RESPONSE,
    "nearby_services": [
        {
            "name": "Baker Street Bank",
            "service_type": "Bank",
            "latitude": 51.5226,
            "longitude": -0.1571,
            "distance_km": 0.17,
            "address": "1 Baker Street",
            "rating": 4.2,
            "place_id": "pl_1",
        },
        {
            "name": "Marylebone Clinic",
            "service_type": "Hospital",
            "latitude": 51.5201,
            "longitude": -0.1543,
            "distance_km": 0.52,
        },
    ],
    "total_services_found": 2,
}


def mockResponse(statusCode: int = 200, data=None, text: str = ""):
    """Build mocked httpx response, dood!"""
    response = MagicMock()
    response.status_code = statusCode
    response.json.return_value = data
    response.text = text
    return response


@pytest.mark.asyncio
async def test_client_initialization():
    """Test client initialization defaults, dood!"""
    client = MapradarClient(apiKey="test_key")
    assert client.apiKey == "test_key"
    assert client.baseUrl == "https://api.mapradar.io"
    assert client.requestTimeout == 30

    client2 = MapradarClient(apiKey="test_key", baseUrl="http://localhost:8080/", requestTimeout=5)
    assert client2.baseUrl == "http://localhost:8080"
    assert client2.requestTimeout == 5


@pytest.mark.asyncio
async def test_geocode_success():
    """Test geocode request and decoding, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        session.get.return_value = mockResponse(200, LOCATION_RESPONSE)

        location = await client.geocode("  221B Baker Street ")

        assert isinstance(location, GeoLocation)
        assert location.city == "London"
        assert location.latitude == 51.5238

        session.get.assert_called_once()
        callArgs = session.get.call_args
        assert callArgs[0][0] == "https://api.mapradar.io/v1/geocode"
        assert callArgs[1]["params"] == {"address": "221B Baker Street"}
        assert callArgs[1]["headers"]["Authorization"] == "Bearer test_key"
        mock_client.assert_called_once_with(timeout=30)


@pytest.mark.asyncio
async def test_reverse_geocode_object_response():
    """Test reverse geocoding with {"address": ...} payload, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        session.get.return_value = mockResponse(200, {"address": "221B Baker Street, London"})

        address = await client.reverseGeocode(51.5238, -0.1586)

        assert address == "221B Baker Street, London"
        callArgs = session.get.call_args
        assert callArgs[0][0] == "https://api.mapradar.io/v1/reverse"
        assert callArgs[1]["params"] == {"lat": 51.5238, "lon": -0.1586}


@pytest.mark.asyncio
async def test_reverse_geocode_string_response():
    """Test reverse geocoding with bare string payload, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        session.get.return_value = mockResponse(200, "Eiffel Tower, Paris")

        assert await client.reverseGeocode(48.8584, 2.2945) == "Eiffel Tower, Paris"


@pytest.mark.asyncio
async def test_reverse_geocode_unexpected_response():
    """Test reverse geocoding with payload lacking address, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        session.get.return_value = mockResponse(200, {"display_name": "Somewhere"})

        with pytest.raises(SerializationError):
            await client.reverseGeocode(0.0, 0.0)


@pytest.mark.asyncio
async def test_fetch_intelligence_payload():
    """Test nearby search request body and decoding, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        session.post.return_value = mockResponse(200, INTELLIGENCE_RESPONSE)

        intel = await client.fetchIntelligence(
            SearchQuery.fromCoordinates(51.5, -0.1),
            [ServiceType.BANK, ServiceType.BUS_STOP],
            radius=500.0,
            maxResults=3,
        )

        assert intel.total_services_found == 2
        assert intel.nearby_services[1].service_type is ServiceType.HOSPITAL
        assert intel.nearby_services[1].rating is None

        session.post.assert_called_once()
        callArgs = session.post.call_args
        assert callArgs[0][0] == "https://api.mapradar.io/v1/intelligence"
        assert callArgs[1]["headers"]["Content-Type"] == "application/json"
        assert json.loads(callArgs[1]["content"]) == {
            "query": {"Coordinates": {"latitude": 51.5, "longitude": -0.1}},
            "service_types": ["Bank", "BusStop"],
            "radius": 500.0,
            "max_results": 3,
        }


@pytest.mark.asyncio
async def test_fetch_intelligence_rejects_nan_before_sending():
    """Test NaN in request is a serialization error and nothing is sent, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value

        with pytest.raises(SerializationError):
            await client.fetchIntelligence(CoordinatesQuery(math.nan, 0.0), [ServiceType.BANK])

        session.post.assert_not_called()


@pytest.mark.asyncio
async def test_fetch_intelligence_bad_payload():
    """Test response not matching data model, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        session.post.return_value = mockResponse(200, {"nearby_services": []})

        with pytest.raises(SerializationError):
            await client.fetchIntelligence(SearchQuery.fromAddress("Paris"), [ServiceType.BANK])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "statusCode, errorClass",
    [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (429, RateLimitError),
        (500, APIError),
        (418, APIError),
    ],
)
async def test_error_status_mapping(statusCode, errorClass):
    """Test HTTP status to exception mapping, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        response = mockResponse(statusCode, text="oops")
        response.json.side_effect = json.JSONDecodeError("Expecting value", "oops", 0)
        session.get.return_value = response

        with pytest.raises(errorClass) as excInfo:
            await client.geocode("Test")

        assert excInfo.value.status == statusCode


@pytest.mark.asyncio
async def test_error_uses_json_rpc_envelope():
    """Test JSON-RPC error body provides message and code, dood!"""
    client = MapradarClient(apiKey="test_key")
    body = {"jsonrpc": "2.0", "error": {"code": -32001, "message": "Address not recognised"}, "id": "1"}

    with patch("httpx.AsyncClient") as mock_client:
        session = mock_client.return_value.__aenter__.return_value
        session.get.return_value = mockResponse(404, body)

        with pytest.raises(NotFoundError) as excInfo:
            await client.geocode("Nowhere")

        assert str(excInfo.value) == "Address not recognised (code: -32001)"
        assert excInfo.value.response == body


@pytest.mark.asyncio
async def test_timeout_exception():
    """Test handling of timeout exception, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        mock_client.return_value.__aenter__.return_value.get.side_effect = httpx.TimeoutException("Timeout")

        with pytest.raises(NetworkError):
            await client.geocode("Test")


@pytest.mark.asyncio
async def test_network_error():
    """Test handling of network error, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        mock_client.return_value.__aenter__.return_value.get.side_effect = httpx.ConnectError("Connection refused")

        with pytest.raises(NetworkError, match="Connection refused"):
            await client.reverseGeocode(1.0, 2.0)


@pytest.mark.asyncio
async def test_json_decode_error():
    """Test handling of JSON decode error on success status, dood!"""
    client = MapradarClient(apiKey="test_key")

    with patch("httpx.AsyncClient") as mock_client:
        response = mockResponse(200)
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
        mock_client.return_value.__aenter__.return_value.get.return_value = response

        with pytest.raises(SerializationError):
            await client.geocode("Test")
