"""
Radio Geolocator
================

Converts a list of access point observations into a location fix.

Strategy:
1. No observations -> no fix, no network call
2. Ask the remote positioning service once (MLS-compatible API)
3. If that gives no usable fix, fall back to the offline table: the first
   observation in scan order that the table knows wins

locate() never raises.

Author: Insider Locator Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from .http_client import (
    DEFAULT_TIMEOUT,
    MalformedResponseError,
    as_float,
    create_session,
    fetch_json,
)
from .models import AccessPointObservation, RadioLocationResult
from .offline_table import OfflineFallbackTable
from .radio_scanner import quality_to_dbm

logger = logging.getLogger(__name__)

DEFAULT_POSITIONING_URL = "https://api.beacondb.net/v1/geolocate"


def build_positioning_request(observations: Sequence[AccessPointObservation]) -> Dict[str, Any]:
    """
    One wifiAccessPoints entry per observation, in scan order.

    Observations without a signal reading are sent without
    signalStrength rather than with an invented value.
    """
    access_points: List[Dict[str, Any]] = []
    for observation in observations:
        entry: Dict[str, Any] = {"macAddress": observation.identifier}
        if observation.signal_quality is not None:
            entry["signalStrength"] = quality_to_dbm(observation.signal_quality)
        access_points.append(entry)
    return {"wifiAccessPoints": access_points}


def parse_positioning_response(payload: Dict[str, Any]) -> RadioLocationResult:
    """Extract a remote fix; raises MalformedResponseError when there is none."""
    location = payload.get("location")
    if not isinstance(location, dict):
        raise MalformedResponseError("positioning response has no location")

    latitude = as_float(location.get("lat"))
    longitude = as_float(location.get("lng"))
    if latitude is None or longitude is None:
        raise MalformedResponseError("positioning response has no usable lat/lng")

    return RadioLocationResult.remote(latitude, longitude, as_float(payload.get("accuracy")))


class RadioGeolocator:
    """
    Remote positioning with an offline table fallback.

    Attributes:
        session: HTTP session for the positioning service
        url: Positioning endpoint
        offline_table: Injected BSSID -> location table
        timeout: Request timeout in seconds
        api_key: Optional key sent as the `key` query parameter
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 url: str = DEFAULT_POSITIONING_URL,
                 offline_table: Optional[OfflineFallbackTable] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 api_key: Optional[str] = None):
        self.session = session or create_session()
        self.url = url
        self.offline_table = offline_table if offline_table is not None else OfflineFallbackTable()
        self.timeout = timeout
        self.api_key = api_key

    def locate(self, observations: Sequence[AccessPointObservation]) -> RadioLocationResult:
        if not observations:
            logger.info("No access points to geolocate")
            return RadioLocationResult.no_fix(remote_attempted=False)

        remote = self._query_remote(observations)
        if remote is not None:
            logger.info(f"Remote fix {remote.latitude}, {remote.longitude} (accuracy {remote.accuracy_meters}m)")
            return remote

        return self._offline_fallback(observations)

    def _query_remote(self, observations: Sequence[AccessPointObservation]) -> Optional[RadioLocationResult]:
        params = {"key": self.api_key} if self.api_key else None
        try:
            payload = fetch_json(
                self.session, "POST", self.url,
                timeout=self.timeout,
                params=params,
                json=build_positioning_request(observations),
            )
            return parse_positioning_response(payload)
        except (requests.RequestException, MalformedResponseError) as e:
            logger.warning(f"Remote positioning failed: {e}. Trying offline fallback...")
            return None

    def _offline_fallback(self, observations: Sequence[AccessPointObservation]) -> RadioLocationResult:
        entry = self.offline_table.first_match(observations)
        if entry is None:
            logger.warning("No access point matched the offline table")
            return RadioLocationResult.no_fix(remote_attempted=True)

        logger.info(f"Offline fix from {entry.identifier}: {entry.display_location or 'unnamed location'}")
        return RadioLocationResult.offline(entry)
