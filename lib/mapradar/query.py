"""
Query construction for Mapradar nearby search.

Turns raw command line input (comma-separated type list, optional address,
optional coordinates) into validated ServiceType lists and SearchQuery values.
"""

import logging
from typing import List, Optional

from .exceptions import QueryValidationError
from .models import SearchQuery, ServiceType

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 1000.0
"""Search radius in meters"""
DEFAULT_SERVICE_TYPES = "bank"
DEFAULT_MAX_RESULTS = 10
"""Maximum results per service type"""

LONGITUDE_REQUIRED_MESSAGE = "Longitude is required when latitude is provided"
LOCATION_REQUIRED_MESSAGE = "Either address or coordinates must be provided"


def parseServiceTypes(typesStr: str) -> List[ServiceType]:
    """Parse comma-separated service type tags, dood!

    Order and duplicates are preserved. Unknown tags become Landmark
    (see ServiceType.fromTag).

    Args:
        typesStr: Comma-separated tags, e.g. "bank,hospital"

    Returns:
        List of service types, one per token

    Example:
        >>> parseServiceTypes("bank,unknown,hospital")
        [<ServiceType.BANK: 'Bank'>, <ServiceType.LANDMARK: 'Landmark'>, <ServiceType.HOSPITAL: 'Hospital'>]
    """
    return [ServiceType.fromTag(token) for token in typesStr.split(",")]


def resolveSearchQuery(
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> SearchQuery:
    """Build a SearchQuery from optional address and coordinates.

    Checks are done in a fixed order:
    1. latitude given: longitude is required, coordinates win over address
    2. address given: address query (a lone longitude is ignored)
    3. nothing usable: error

    Raises:
        QueryValidationError: If latitude lacks longitude or no location is given
    """
    if latitude is not None:
        if longitude is None:
            raise QueryValidationError(LONGITUDE_REQUIRED_MESSAGE)
        if address is not None:
            logger.debug("Both address and coordinates given, using coordinates")
        return SearchQuery.fromCoordinates(latitude, longitude)

    if address is not None:
        return SearchQuery.fromAddress(address)

    raise QueryValidationError(LOCATION_REQUIRED_MESSAGE)
