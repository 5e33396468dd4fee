"""
IP Locator
==========

Resolves the host's public IP, coarse location and ISP through an
IP-intelligence service (ip-api.com compatible JSON).

Author: Insider Locator Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, Optional

import requests

from .http_client import (
    DEFAULT_TIMEOUT,
    MalformedResponseError,
    as_float,
    as_text,
    create_session,
    fetch_json,
)
from .models import Availability, IPLocationResult

logger = logging.getLogger(__name__)

DEFAULT_IP_API_URL = "http://ip-api.com/json"


def parse_ip_response(payload: Dict[str, Any]) -> IPLocationResult:
    """
    Turn an ip-api style body into an IPLocationResult.

    Missing or wrongly typed fields become None. A body flagged with
    status "fail" is treated as no answer at all.
    """
    if payload.get("status") == "fail":
        raise MalformedResponseError(
            f"lookup refused: {payload.get('message', 'no message')}"
        )

    return IPLocationResult(
        status=Availability.SUCCESS,
        public_ip=as_text(payload.get("query")),
        city=as_text(payload.get("city")),
        region=as_text(payload.get("regionName")),
        country=as_text(payload.get("country")),
        isp_org=as_text(payload.get("org")) or as_text(payload.get("isp")),
        latitude=as_float(payload.get("lat")),
        longitude=as_float(payload.get("lon")),
    )


class IPLocator:
    """
    Looks up the public IP of this host.

    locate() performs exactly one request and never raises; any failure
    comes back as IPLocationResult.unavailable().
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 url: str = DEFAULT_IP_API_URL, timeout: float = DEFAULT_TIMEOUT):
        self.session = session or create_session()
        self.url = url
        self.timeout = timeout

    def locate(self) -> IPLocationResult:
        try:
            payload = fetch_json(self.session, "GET", self.url, timeout=self.timeout)
            result = parse_ip_response(payload)
        except (requests.RequestException, MalformedResponseError) as e:
            logger.warning(f"IP lookup failed: {e}")
            return IPLocationResult.unavailable()

        logger.info(f"Public IP {result.public_ip or 'unknown'} ({result.country or 'unknown country'})")
        return result
