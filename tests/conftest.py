"""Shared fixtures and fakes. Nothing here touches the network or the radio."""

from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from insider_locator.core.models import (
    AccessPointObservation,
    Availability,
    IPLocationResult,
    LocationReport,
    OfflineFallbackEntry,
    RadioLocationResult,
    SpoofingVerdict,
)
from insider_locator.core.offline_table import OfflineFallbackTable

NEW_DELHI = OfflineFallbackEntry("68:34:21:cb:c2:01", 28.6139, 77.2090, "New Delhi, India")
NEW_YORK = OfflineFallbackEntry("00:11:22:33:44:55", 40.7128, -74.0060, "New York, USA")
LONDON = OfflineFallbackEntry("f4:92:bf:ab:cd:ef", 51.5074, -0.1278, "London, UK")


def make_response(payload: Any = None, status_code: int = 200, json_error: bool = False) -> MagicMock:
    """A stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


def make_session(response: Optional[MagicMock] = None, error: Optional[Exception] = None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = response
    return session


class FakeGeocoder:
    """Reverse geocoder returning a fixed country and counting calls."""

    def __init__(self, country: Optional[str]):
        self.country = country
        self.calls = []

    def country_for(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        return self.country


def ip_result(country: Optional[str] = "India", isp: Optional[str] = "Bharti Airtel Ltd.") -> IPLocationResult:
    return IPLocationResult(
        status=Availability.SUCCESS,
        public_ip="203.0.113.7",
        city="New Delhi",
        region="National Capital Territory of Delhi",
        country=country,
        isp_org=isp,
        latitude=28.6,
        longitude=77.2,
    )


def ap(identifier: str, quality: Optional[int] = 80, name: str = "") -> AccessPointObservation:
    return AccessPointObservation(identifier=identifier, display_name=name, signal_quality=quality)


@pytest.fixture
def offline_table() -> OfflineFallbackTable:
    return OfflineFallbackTable([NEW_DELHI, NEW_YORK, LONDON])


@pytest.fixture
def sample_report() -> LocationReport:
    return LocationReport(
        ip=ip_result(),
        observations=(ap("68:34:21:cb:c2:01", 80, "Office"), ap("aa:bb:cc:dd:ee:ff", None, "")),
        radio=RadioLocationResult.offline(NEW_DELHI),
        hardware_model="MacBookPro18,3",
        verdict=SpoofingVerdict(radio_country="India"),
        generated_at="2026-01-01T00:00:00Z",
    )
