"""
Pytest configuration and common fixtures for Mapradar CLI tests.

All fixtures follow camelCase naming convention.
"""

import io
from unittest.mock import AsyncMock, Mock

import pytest

from internal.cli.dispatcher import MapradarCli
from internal.config.manager import API_KEY_ENV
from lib.mapradar import GeoLocation, LocationIntelligence, MapradarClient, NearbyService, ServiceType

# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def isolatedEnv(tmp_path, monkeypatch):
    """
    Run every test in an empty directory, without API key and colours.

    No stray mapradar.toml or .env from the working tree gets loaded.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(API_KEY_ENV, "")
    monkeypatch.delenv(API_KEY_ENV)
    monkeypatch.setenv("NO_COLOR", "1")


# ============================================================================
# Sample Data
# ============================================================================


@pytest.fixture
def sampleLocation() -> GeoLocation:
    return GeoLocation(
        address="221B Baker Street, London NW1 6XE",
        latitude=51.5238,
        longitude=-0.1586,
        city="London",
        state="England",
        country="United Kingdom",
    )


@pytest.fixture
def sampleIntelligence(sampleLocation) -> LocationIntelligence:
    return LocationIntelligence(
        sampleLocation,
        [
            NearbyService(
                name="Baker Street Bank",
                service_type=ServiceType.BANK,
                latitude=51.5226,
                longitude=-0.1571,
                distance_km=0.17,
                rating=4.5,
            ),
        ],
    )


# ============================================================================
# Client and CLI
# ============================================================================


@pytest.fixture
def mockClient(sampleLocation, sampleIntelligence) -> Mock:
    """
    Create a mocked MapradarClient.

    Returns:
        Mock: client whose async methods return sample data

    Example:
        async def testSomething(mockClient):
            mockClient.geocode.side_effect = NotFoundError()
    """
    mock = Mock(spec=MapradarClient)
    mock.geocode = AsyncMock(return_value=sampleLocation)
    mock.reverseGeocode = AsyncMock(return_value="221B Baker Street, London NW1 6XE")
    mock.fetchIntelligence = AsyncMock(return_value=sampleIntelligence)
    return mock


@pytest.fixture
def stdout() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def stderr() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def cli(mockClient, stdout, stderr) -> MapradarCli:
    return MapradarCli(mockClient, stdout=stdout, stderr=stderr)
