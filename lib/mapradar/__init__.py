"""
Mapradar API Client Library

This module provides a Python async client library for the Mapradar location
intelligence API with typed request/response models, dood!

Example usage:
    from lib.mapradar import MapradarClient, SearchQuery, ServiceType

    client = MapradarClient(apiKey="your_api_key")

    # Forward geocoding
    location = await client.geocode("221B Baker Street, London")

    # Reverse geocoding
    address = await client.reverseGeocode(51.5238, -0.1586)

    # Nearby amenities
    intel = await client.fetchIntelligence(
        SearchQuery.fromCoordinates(51.5238, -0.1586),
        [ServiceType.BANK],
    )
"""

from lib.mapradar.client import MapradarClient
from lib.mapradar.exceptions import (
    APIError,
    AuthenticationError,
    MapradarError,
    NetworkError,
    NotFoundError,
    QueryValidationError,
    RateLimitError,
    SerializationError,
)
from lib.mapradar.models import (
    UNKNOWN_TAG_FALLBACK,
    AddressQuery,
    CoordinatesQuery,
    GeoLocation,
    JsonRpcError,
    JsonRpcResponse,
    LocationIntelligence,
    NearbyService,
    SearchQuery,
    ServiceType,
)
from lib.mapradar.query import (
    DEFAULT_MAX_RESULTS,
    DEFAULT_RADIUS,
    DEFAULT_SERVICE_TYPES,
    parseServiceTypes,
    resolveSearchQuery,
)

__all__ = [
    "MapradarClient",
    # Models
    "GeoLocation",
    "ServiceType",
    "UNKNOWN_TAG_FALLBACK",
    "NearbyService",
    "LocationIntelligence",
    "SearchQuery",
    "AddressQuery",
    "CoordinatesQuery",
    "JsonRpcError",
    "JsonRpcResponse",
    # Query building
    "parseServiceTypes",
    "resolveSearchQuery",
    "DEFAULT_RADIUS",
    "DEFAULT_SERVICE_TYPES",
    "DEFAULT_MAX_RESULTS",
    # Errors
    "MapradarError",
    "QueryValidationError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "NetworkError",
    "SerializationError",
]
