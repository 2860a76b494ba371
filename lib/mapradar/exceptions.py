"""
Mapradar API Exceptions

This module contains the exception hierarchy used by the Mapradar client library
and the CLI built on top of it, dood!
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class MapradarError(Exception):
    """Base exception class for all Mapradar errors, dood!

    Everything the CLI reports to the user is a MapradarError, so catching
    this class is enough to turn any failure into an exit code.

    Attributes:
        message: Human-readable error message
        code: Error code (HTTP status or JSON-RPC error code, if available)
        response: Raw API response data (if available)
    """

    def __init__(
        self,
        message: str,
        code: Optional[Any] = None,
        response: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.response = response
        logger.debug(f"{self.__class__.__name__}: {message} (code: {code})")

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (code: {self.code})"
        return self.message


class QueryValidationError(MapradarError):
    """Raised when CLI input can't be turned into a valid search query."""


class APIError(MapradarError):
    """Raised when the API returns an error response.

    Attributes:
        status: HTTP status code of the failed response
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[Any] = None,
        response: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code if code is not None else status, response)
        self.status = status


class AuthenticationError(APIError):
    """Raised when the API key is rejected (401/403)."""

    def __init__(
        self,
        message: str = "Authentication failed. Check your API key.",
        status: Optional[int] = 401,
        code: Optional[Any] = None,
        response: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status, code, response)


class NotFoundError(APIError):
    """Raised when the requested location can't be found (404)."""

    def __init__(
        self,
        message: str = "Location not found",
        status: Optional[int] = 404,
        code: Optional[Any] = None,
        response: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status, code, response)


class RateLimitError(APIError):
    """Raised when the API rate limit is exceeded (429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        status: Optional[int] = 429,
        code: Optional[Any] = None,
        response: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status, code, response)


class NetworkError(MapradarError):
    """Raised on request timeouts and transport failures."""


class SerializationError(MapradarError):
    """Raised when data can't be encoded to or decoded from JSON, dood!

    Typical causes are non-finite floats (NaN/Infinity) on encoding and
    payloads that don't match the data model on decoding.
    """
