"""
Mapradar API Async Client

This module provides the MapradarClient class for interacting with the
Mapradar location intelligence API: geocoding, reverse geocoding and
nearby amenity search.
"""

import json
import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from .exceptions import (
    APIError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    SerializationError,
)
from .models import GeoLocation, JsonRpcResponse, LocationIntelligence, SearchQuery, ServiceType
from .query import DEFAULT_MAX_RESULTS, DEFAULT_RADIUS

logger = logging.getLogger(__name__)


class MapradarClient:
    """Async client for the Mapradar API, dood!

    Every call performs exactly one HTTP request in a fresh session. There
    are no retries and no caching: the first failure is raised to the caller
    as a MapradarError subclass.

    Example:
        >>> from lib.mapradar import MapradarClient, SearchQuery, ServiceType
        >>>
        >>> client = MapradarClient(apiKey="your_api_key")
        >>>
        >>> # Forward geocoding
        >>> location = await client.geocode("221B Baker Street, London")
        >>>
        >>> # Reverse geocoding
        >>> address = await client.reverseGeocode(51.5238, -0.1586)
        >>>
        >>> # Nearby amenities
        >>> intel = await client.fetchIntelligence(
        ...     SearchQuery.fromAddress("221B Baker Street, London"),
        ...     [ServiceType.BANK, ServiceType.HOSPITAL],
        ...     radius=500,
        ... )
    """

    API_BASE_URL = "https://api.mapradar.io"

    def __init__(
        self,
        apiKey: str,
        baseUrl: Optional[str] = None,
        requestTimeout: int = 30,
    ):
        """Initialize Mapradar client, dood!

        Args:
            apiKey: Mapradar API key (required)
            baseUrl: API base URL (default: API_BASE_URL)
            requestTimeout: HTTP request timeout in seconds (default: 30)
        """
        self.apiKey = apiKey
        self.baseUrl = (baseUrl or self.API_BASE_URL).rstrip("/")
        self.requestTimeout = requestTimeout

    async def geocode(self, address: str) -> GeoLocation:
        """Forward geocoding: convert address to coordinates.

        Args:
            address: Free-form address (e.g., "221B Baker Street, London")

        Returns:
            Resolved location

        Raises:
            MapradarError: On API, network or decoding failure
        """
        data = await self._makeRequest("GET", "v1/geocode", params={"address": address.strip()})
        return self._decode(GeoLocation.from_dict, data, "geocode")

    async def reverseGeocode(self, lat: float, lon: float) -> str:
        """Reverse geocoding: convert coordinates to an address.

        Args:
            lat: Latitude (-90 to 90)
            lon: Longitude (-180 to 180)

        Returns:
            Formatted address

        Raises:
            MapradarError: On API, network or decoding failure
        """
        data = await self._makeRequest("GET", "v1/reverse", params={"lat": lat, "lon": lon})

        # Service returns either {"address": "..."} or a bare string
        if isinstance(data, str):
            return data
        if isinstance(data, dict) and isinstance(data.get("address"), str):
            return data["address"]
        raise SerializationError(f"Unexpected reverse geocode response: {data!r}")

    async def fetchIntelligence(
        self,
        query: SearchQuery,
        serviceTypes: Sequence[ServiceType],
        radius: float = DEFAULT_RADIUS,
        maxResults: int = DEFAULT_MAX_RESULTS,
    ) -> LocationIntelligence:
        """Find amenities of the given types around a location, dood!

        Args:
            query: Address or coordinates to search around
            serviceTypes: Amenity types to look for
            radius: Search radius in meters (default: 1000)
            maxResults: Maximum results per service type (default: 10)

        Returns:
            Location with nearby services

        Raises:
            MapradarError: On API, network or decoding failure
        """
        payload = {
            "query": query.to_dict(),
            "service_types": [serviceType.value for serviceType in serviceTypes],
            "radius": radius,
            "max_results": maxResults,
        }
        data = await self._makeRequest("POST", "v1/intelligence", payload=payload)
        return self._decode(LocationIntelligence.from_dict, data, "intelligence")

    def _decode(self, decoder, data: Any, what: str):
        """Run model decoder, converting failures into SerializationError"""
        if not isinstance(data, dict):
            raise SerializationError(f"Unexpected {what} response: {data!r}")
        try:
            return decoder(data)
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Failed to decode {what} response: {e}")

    async def _makeRequest(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make HTTP request to Mapradar API, dood!

        Single point for all HTTP requests with error handling and
        authentication. Creates new session per request.

        Args:
            method: "GET" or "POST"
            endpoint: API endpoint path (e.g., "v1/geocode")
            params: Query parameters
            payload: JSON body (POST only)

        Returns:
            Parsed JSON response

        Raises:
            AuthenticationError: 401/403
            NotFoundError: 404
            RateLimitError: 429
            APIError: Any other non-200 status
            NetworkError: Timeout or connection error
            SerializationError: Invalid JSON (request or response)
        """
        url = f"{self.baseUrl}/{endpoint}"
        headers = {
            "Authorization": f"Bearer {self.apiKey}",
            "Accept": "application/json",
        }

        logger.debug(f"Making {method} request to {url} with params: {params}, payload: {payload}")

        try:
            async with httpx.AsyncClient(timeout=self.requestTimeout) as session:
                if method == "POST":
                    # Serialize ourselves to reject NaN/Infinity before sending
                    content = json.dumps(payload or {}, allow_nan=False)
                    headers["Content-Type"] = "application/json"
                    response = await session.post(url, params=params, content=content, headers=headers)
                else:
                    response = await session.get(url, params=params, headers=headers)

        except httpx.TimeoutException:
            logger.error("Request timeout")
            raise NetworkError(f"Request to {url} timed out after {self.requestTimeout}s")

        except httpx.RequestError as e:
            logger.error(f"Network error: {e}")
            raise NetworkError(f"Network error: {e}")

        except ValueError as e:
            raise SerializationError(f"Failed to encode request: {e}")

        if response.status_code != 200:
            self._raiseForStatus(response)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            raise SerializationError(f"Failed to parse JSON response: {e}")

        logger.debug(f"API request successful: {response.status_code}")
        return data

    def _raiseForStatus(self, response: httpx.Response) -> None:
        """Convert non-200 response into matching APIError subclass"""
        status = response.status_code
        message: Optional[str] = None
        code: Optional[Any] = None
        body: Optional[Dict[str, Any]] = None

        # Service reports failures as JSON-RPC error envelopes when it can
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error") is not None:
            try:
                rpcError = JsonRpcResponse.from_dict(body).error
                if rpcError is not None:
                    message = rpcError.message
                    code = rpcError.code
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Error body is not a JSON-RPC envelope: {e}")
        if not isinstance(body, dict):
            body = None

        errorClass: type[APIError]
        if status in (401, 403):
            logger.error("Invalid API key")
            errorClass = AuthenticationError
        elif status == 404:
            logger.warning("Location not found")
            errorClass = NotFoundError
        elif status == 429:
            logger.error("Rate limit exceeded")
            errorClass = RateLimitError
        else:
            logger.error(f"API request failed: {status}")
            logger.error(f"Response text: {response.text}")
            errorClass = APIError
            if message is None:
                message = f"API request failed with status {status}"

        if message is None:
            raise errorClass(status=status, response=body)
        raise errorClass(message, status=status, code=code, response=body)
