"""
Command dispatcher for Mapradar CLI.

Runs exactly one command against the API client and renders its result.
"""

import argparse
import logging
import sys
from typing import Optional, TextIO

from lib.mapradar import (
    AddressQuery,
    CoordinatesQuery,
    MapradarClient,
    MapradarError,
    SearchQuery,
    parseServiceTypes,
    resolveSearchQuery,
)

from .output import printError, renderJson

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1


def describeQuery(query: SearchQuery) -> str:
    """Human-readable query description for logs"""
    match query:
        case AddressQuery(address=address):
            return f"address '{address}'"
        case CoordinatesQuery(latitude=latitude, longitude=longitude):
            return f"coordinates ({latitude}, {longitude})"
        case _:
            raise TypeError(f"Unknown SearchQuery variant: {type(query).__name__}")


class MapradarCli:
    """Executes parsed CLI commands, dood!

    Every command either prints its complete result to stdout and returns
    EXIT_OK, or prints `Error: <message>` to stderr and returns EXIT_ERROR.
    Nothing is written to stdout on failure.
    """

    def __init__(
        self,
        client: MapradarClient,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.client = client
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

    async def run(self, args: argparse.Namespace) -> int:
        """Run command from parsed arguments and return process exit code."""
        try:
            match args.command:
                case "geocode":
                    output = await self.geocode(args.address)
                case "reverse":
                    output = await self.reverse(args.latitude, args.longitude)
                case "nearby":
                    output = await self.nearby(
                        address=args.address,
                        latitude=args.latitude,
                        longitude=args.longitude,
                        radius=args.radius,
                        typesStr=args.type,
                        maxResults=args.max_results,
                    )
                case _:
                    raise ValueError(f"Unknown command: {args.command}")
        except MapradarError as e:
            logger.debug(f"Command {args.command} failed: {e!r}")
            printError(str(e), self.stderr)
            return EXIT_ERROR

        print(output, file=self.stdout)
        return EXIT_OK

    async def geocode(self, address: str) -> str:
        """Geocode address, returns pretty JSON of the location"""
        logger.info(f"Geocoding '{address}'")
        location = await self.client.geocode(address)
        return renderJson(location.to_dict())

    async def reverse(self, latitude: float, longitude: float) -> str:
        """Reverse geocode coordinates, returns debug form of the address"""
        logger.info(f"Reverse geocoding ({latitude}, {longitude})")
        address = await self.client.reverseGeocode(latitude, longitude)
        return repr(address)

    async def nearby(
        self,
        address: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        radius: float,
        typesStr: str,
        maxResults: int,
    ) -> str:
        """Search amenities around address or coordinates, returns pretty JSON"""
        serviceTypes = parseServiceTypes(typesStr)
        query = resolveSearchQuery(address=address, latitude=latitude, longitude=longitude)
        logger.info(
            f"Searching {', '.join(t.value for t in serviceTypes)} within {radius}m of {describeQuery(query)}"
        )

        intel = await self.client.fetchIntelligence(query, serviceTypes, radius, maxResults)
        return renderJson(intel.to_dict())
