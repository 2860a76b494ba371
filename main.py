"""
Mapradar - command line client for Mapradar Location Intelligence.

Geocode addresses, reverse geocode coordinates and find nearby amenities.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, NoReturn, Optional

from internal.cli.dispatcher import EXIT_ERROR, MapradarCli
from internal.cli.output import printError
from internal.config.manager import API_KEY_ENV, ConfigManager
from lib.logging_utils import initLogging
from lib.mapradar import DEFAULT_MAX_RESULTS, DEFAULT_RADIUS, DEFAULT_SERVICE_TYPES, MapradarClient

# Configure basic logging first, results go to stdout so logs stay on stderr
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)


class MapradarArgumentParser(argparse.ArgumentParser):
    """ArgumentParser which reports usage errors like any other CLI error (exit code 1)."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        printError(message, sys.stderr)
        self.exit(EXIT_ERROR)


def nonNegativeInt(value: str) -> int:
    """argparse type for counts"""
    try:
        ret = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if ret < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {ret}")
    return ret


def buildParser() -> MapradarArgumentParser:
    """Build command line parser."""
    parser = MapradarArgumentParser(
        prog="mapradar",
        description="CLI for Mapradar Location Intelligence",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-k",
        "--api-key",
        dest="api_key",
        default=None,
        help=f"Mapradar API key (default: ${API_KEY_ENV}, then `api-key` in [mapradar] config section)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to TOML configuration file (default: mapradar.toml if present)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    geocodeParser = subparsers.add_parser(
        "geocode", help="Geocode an address to coordinates", allow_abbrev=False
    )
    geocodeParser.add_argument("address", help="Address to geocode")

    reverseParser = subparsers.add_parser(
        "reverse", help="Reverse geocode coordinates to an address", allow_abbrev=False
    )
    reverseParser.add_argument("latitude", type=float, help="Latitude (decimal degrees)")
    reverseParser.add_argument("longitude", type=float, help="Longitude (decimal degrees)")

    nearbyParser = subparsers.add_parser("nearby", help="Find nearby amenities", allow_abbrev=False)
    nearbyParser.add_argument("-a", "--address", "--addr", dest="address", default=None, help="Address to search around")
    nearbyParser.add_argument("--latitude", "--lat", dest="latitude", type=float, default=None, help="Latitude")
    nearbyParser.add_argument(
        "--longitude", "--lng", "--lon", dest="longitude", type=float, default=None, help="Longitude"
    )
    nearbyParser.add_argument(
        "-r",
        "--radius",
        type=float,
        default=DEFAULT_RADIUS,
        help=f"Radius in meters (default: {DEFAULT_RADIUS:g})",
    )
    nearbyParser.add_argument(
        "-t",
        "--type",
        default=DEFAULT_SERVICE_TYPES,
        help=(
            "Comma-separated amenity types: bank, hospital, school, restaurant, bus-stop, market, mall, "
            "fuel-station, train-station, taxi-stand, landmark. Unknown types are searched as landmark "
            f"(default: {DEFAULT_SERVICE_TYPES})"
        ),
    )
    nearbyParser.add_argument(
        "-m",
        "--max-results",
        "--limit",
        dest="max_results",
        type=nonNegativeInt,
        default=DEFAULT_MAX_RESULTS,
        help=f"Maximum number of results to return per service (default: {DEFAULT_MAX_RESULTS})",
    )

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return buildParser().parse_args(argv)


def createClient(configManager: ConfigManager, apiKey: str) -> MapradarClient:
    """Create API client using [mapradar] config section."""
    mapradarConfig = configManager.getMapradarConfig()
    return MapradarClient(
        apiKey=apiKey,
        baseUrl=mapradarConfig.get("base-url"),
        requestTimeout=int(mapradarConfig.get("timeout", 30)),
    )


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """Main entry point."""
    parser = buildParser()
    args = parser.parse_args(argv)

    try:
        configManager = ConfigManager(configPath=args.config, configDirs=args.config_dir)
        initLogging(configManager.getLoggingConfig(), verbose=args.verbose)

        apiKey = configManager.getApiKey(args.api_key)
        if not apiKey:
            parser.error(f"the following arguments are required: --api-key/-k (or set ${API_KEY_ENV})")

        client = createClient(configManager, apiKey)
        exitCode = asyncio.run(MapradarCli(client).run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exitCode = EXIT_ERROR
    except Exception as e:
        logger.exception(e)
        printError(f"Unexpected error: {e}", sys.stderr)
        exitCode = EXIT_ERROR

    sys.exit(exitCode)


if __name__ == "__main__":
    main()
