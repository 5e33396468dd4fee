"""
Reverse geocoding of a radio fix to a country name.

Used only by the location mismatch rule. Returns None on any failure so
the rule is skipped rather than tripped.
"""

import logging
from typing import Optional

import requests

from .http_client import (
    DEFAULT_TIMEOUT,
    MalformedResponseError,
    as_text,
    create_session,
    fetch_json,
)

logger = logging.getLogger(__name__)

DEFAULT_REVERSE_GEOCODE_URL = "https://geocode.maps.co/reverse"


class ReverseGeocoder:
    """Nominatim-style reverse geocoder (geocode.maps.co by default)."""

    def __init__(self, session: Optional[requests.Session] = None,
                 url: str = DEFAULT_REVERSE_GEOCODE_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 api_key: Optional[str] = None):
        self.session = session or create_session()
        self.url = url
        self.timeout = timeout
        self.api_key = api_key

    def country_for(self, latitude: float, longitude: float) -> Optional[str]:
        params = {"lat": latitude, "lon": longitude, "format": "json"}
        if self.api_key:
            params["api_key"] = self.api_key

        try:
            payload = fetch_json(self.session, "GET", self.url, timeout=self.timeout, params=params)
        except (requests.RequestException, MalformedResponseError) as e:
            logger.warning(f"Reverse geocoding failed: {e}")
            return None

        country = as_text(payload.get("country"))
        if country is None and isinstance(payload.get("address"), dict):
            country = as_text(payload["address"].get("country"))

        if country is None:
            logger.debug(f"No country for {latitude}, {longitude}")
        return country
