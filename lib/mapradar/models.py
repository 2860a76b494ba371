"""
Mapradar Data Models

This module defines the value types exchanged with the Mapradar location
intelligence API: resolved locations, amenity records, search queries and
a minimal JSON-RPC 2.0 envelope, dood!

All models are immutable dataclasses with `to_dict()` / `from_dict()` helpers.
Wire field names are the snake_case attribute names.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Optional, Sequence

from .exceptions import SerializationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """Resolved geographic location, dood!"""

    address: str
    """Formatted address"""
    latitude: float
    longitude: float
    city: Optional[str] = None
    state: Optional[str] = None
    country: str = ""

    def __repr__(self) -> str:
        return f"Location(address='{self.address}', lat={self.latitude}, lon={self.longitude})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "city": self.city,
            "state": self.state,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoLocation":
        """Create GeoLocation from API response dictionary.

        Raises:
            KeyError: If a required field is missing
            TypeError, ValueError: If coordinates aren't numbers
        """
        return cls(
            address=str(data["address"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            city=data.get("city"),
            state=data.get("state"),
            country=str(data["country"]),
        )


class ServiceType(StrEnum):
    """Amenity categories supported by nearby search.

    Values are the names used on the wire. Use `fromTag()` to parse the
    lower-case dashed tags accepted on the command line.
    """

    BUS_STOP = "BusStop"
    MARKET = "Market"
    SCHOOL = "School"
    MALL = "Mall"
    HOSPITAL = "Hospital"
    BANK = "Bank"
    RESTAURANT = "Restaurant"
    FUEL_STATION = "FuelStation"
    TRAIN_STATION = "TrainStation"
    TAXI_STAND = "TaxiStand"
    LANDMARK = "Landmark"

    @property
    def tag(self) -> str:
        """CLI tag for this service type (e.g. "bus-stop")."""
        return SERVICE_TYPE_TAGS_REVERSE[self]

    @classmethod
    def fromTag(cls, tag: str) -> "ServiceType":
        """Parse a CLI tag into a ServiceType, dood!

        The tag is trimmed and then matched case-sensitively against the known
        tags. Unknown tags are NOT an error: they map to UNKNOWN_TAG_FALLBACK
        (Landmark). Note that this also hides typos like "hopsital".

        Args:
            tag: Tag text, e.g. "bank" or " fuel-station "

        Returns:
            Matching ServiceType or UNKNOWN_TAG_FALLBACK
        """
        tag = tag.strip()
        serviceType = SERVICE_TYPE_TAGS.get(tag)
        if serviceType is None:
            logger.debug(f"Unknown service type tag '{tag}', falling back to {UNKNOWN_TAG_FALLBACK.value}")
            return UNKNOWN_TAG_FALLBACK
        return serviceType


SERVICE_TYPE_TAGS: Dict[str, ServiceType] = {
    "bus-stop": ServiceType.BUS_STOP,
    "market": ServiceType.MARKET,
    "school": ServiceType.SCHOOL,
    "mall": ServiceType.MALL,
    "hospital": ServiceType.HOSPITAL,
    "bank": ServiceType.BANK,
    "restaurant": ServiceType.RESTAURANT,
    "fuel-station": ServiceType.FUEL_STATION,
    "train-station": ServiceType.TRAIN_STATION,
    "taxi-stand": ServiceType.TAXI_STAND,
    "landmark": ServiceType.LANDMARK,
}
SERVICE_TYPE_TAGS_REVERSE: Dict[ServiceType, str] = {v: k for k, v in SERVICE_TYPE_TAGS.items()}

UNKNOWN_TAG_FALLBACK = ServiceType.LANDMARK
"""ServiceType used for any tag not present in SERVICE_TYPE_TAGS"""


@dataclass(frozen=True, slots=True)
class NearbyService:
    """Single amenity found near a location"""

    name: str
    service_type: ServiceType
    latitude: float
    longitude: float
    distance_km: float
    """Distance from the search point in kilometers (>= 0)"""
    address: Optional[str] = None
    rating: Optional[float] = None
    """Rating, conventionally 0-5"""
    place_id: Optional[str] = None

    def __post_init__(self):
        """Validate distance"""
        if self.distance_km < 0:
            raise ValueError(f"distance_km must be non-negative, got {self.distance_km}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "service_type": self.service_type.value,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "distance_km": self.distance_km,
            "address": self.address,
            "rating": self.rating,
            "place_id": self.place_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NearbyService":
        rating = data.get("rating")
        return cls(
            name=str(data["name"]),
            # Wire values are strict: only CLI tags get the Landmark fallback
            service_type=ServiceType(data["service_type"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            distance_km=float(data["distance_km"]),
            address=data.get("address"),
            rating=float(rating) if rating is not None else None,
            place_id=data.get("place_id"),
        )


@dataclass(frozen=True, slots=True)
class LocationIntelligence:
    """Location together with the amenities found around it, dood!

    `total_services_found` is derived from `nearby_services` and can't be
    passed in, so the two never disagree.
    """

    location: GeoLocation
    nearby_services: Sequence[NearbyService] = ()

    def __post_init__(self):
        """Freeze services order"""
        object.__setattr__(self, "nearby_services", tuple(self.nearby_services))

    @property
    def total_services_found(self) -> int:
        return len(self.nearby_services)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "nearby_services": [service.to_dict() for service in self.nearby_services],
            "total_services_found": self.total_services_found,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocationIntelligence":
        """Create LocationIntelligence from API response dictionary.

        Any `total_services_found` in the payload is ignored and recomputed.
        """
        reportedTotal = data.get("total_services_found")
        services = [NearbyService.from_dict(item) for item in data.get("nearby_services") or []]
        if reportedTotal is not None and reportedTotal != len(services):
            logger.warning(f"API reported {reportedTotal} services but returned {len(services)}")
        return cls(
            location=GeoLocation.from_dict(data["location"]),
            nearby_services=services,
        )


class SearchQuery:
    """Search query: either an address or a coordinate pair.

    This is a sum type with exactly two variants, AddressQuery and
    CoordinatesQuery. Build it with `fromAddress()` / `fromCoordinates()`
    and consume it with `match` over the variant classes.
    """

    __slots__ = ()

    @staticmethod
    def fromAddress(address: str) -> "AddressQuery":
        return AddressQuery(address=address)

    @staticmethod
    def fromCoordinates(latitude: float, longitude: float) -> "CoordinatesQuery":
        return CoordinatesQuery(latitude=latitude, longitude=longitude)

    def to_dict(self) -> Dict[str, Any]:
        """Externally tagged wire form, e.g. {"Address": {"address": "..."}}"""
        match self:
            case AddressQuery(address=address):
                return {"Address": {"address": address}}
            case CoordinatesQuery(latitude=latitude, longitude=longitude):
                return {"Coordinates": {"latitude": latitude, "longitude": longitude}}
            case _:
                raise TypeError(f"Unknown SearchQuery variant: {type(self).__name__}")

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SearchQuery":
        if not isinstance(data, dict) or len(data) != 1:
            raise ValueError(f"SearchQuery must have exactly one variant, got {data!r}")

        match data:
            case {"Address": {"address": address}}:
                return SearchQuery.fromAddress(str(address))
            case {"Coordinates": {"latitude": latitude, "longitude": longitude}}:
                return SearchQuery.fromCoordinates(float(latitude), float(longitude))
            case _:
                raise ValueError(f"Unknown SearchQuery variant: {data!r}")


@dataclass(frozen=True, slots=True)
class AddressQuery(SearchQuery):
    """Search around a free-form address"""

    address: str


@dataclass(frozen=True, slots=True)
class CoordinatesQuery(SearchQuery):
    """Search around a latitude/longitude pair"""

    latitude: float
    longitude: float


JSONRPC_VERSION = "2.0"


@dataclass(frozen=True, slots=True)
class JsonRpcError:
    """JSON-RPC 2.0 error object"""

    code: int
    message: str
    data: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.message} (code: {self.code})"

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JsonRpcError":
        errorData = data.get("data")
        return cls(
            code=int(data["code"]),
            message=str(data["message"]),
            data=errorData if errorData is None or isinstance(errorData, str) else json.dumps(errorData),
        )


@dataclass(frozen=True, slots=True)
class JsonRpcResponse:
    """JSON-RPC 2.0 response envelope, dood!

    Exactly one of `result` and `error` is meaningful: passing both raises
    ValueError. A response without an error is a success, even when
    `result` is None. `jsonrpc` is always "2.0".
    """

    id: str
    result: Optional[Any] = None
    error: Optional[JsonRpcError] = None
    jsonrpc: str = field(default=JSONRPC_VERSION, init=False)

    def __post_init__(self):
        """Validate result/error exclusivity"""
        if self.result is not None and self.error is not None:
            raise ValueError("JSON-RPC response can't have both result and error")

    @property
    def isError(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        ret: Dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            ret["error"] = self.error.to_dict()
        else:
            ret["result"] = self.result
        ret["id"] = self.id
        return ret

    def to_json(self) -> str:
        """Serialize response to a compact JSON string.

        Raises:
            SerializationError: If the response holds values JSON can't represent
        """
        try:
            return json.dumps(self.to_dict(), ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize JSON-RPC response: {e}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JsonRpcResponse":
        """Parse JSON-RPC response envelope.

        Raises:
            ValueError: If the envelope isn't a valid JSON-RPC 2.0 response
        """
        version = data.get("jsonrpc")
        if version != JSONRPC_VERSION:
            raise ValueError(f"Unsupported JSON-RPC version: {version!r}")

        error = data.get("error")
        return cls(
            id=str(data.get("id")) if data.get("id") is not None else "",
            result=data.get("result"),
            error=JsonRpcError.from_dict(error) if error is not None else None,
        )
