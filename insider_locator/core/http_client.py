"""
HTTP helpers shared by the remote lookups.

Every lookup goes through one requests.Session and one bounded timeout.
Failures surface as exceptions here and are turned into sentinel values
by the caller.
"""

import logging
import math
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 8.0
DEFAULT_USER_AGENT = "insider-locator/1.0"


class LocatorError(Exception):
    """Base class for errors raised inside a data source."""
    pass


class MalformedResponseError(LocatorError):
    """Raised when a service answered with something we cannot read."""
    pass


def create_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    """Create a session carrying our User-Agent (required by geocoders)."""
    session = requests.Session()
    session.headers.update({
        "User-Agent": user_agent,
        "Accept": "application/json",
    })
    return session


def fetch_json(session: requests.Session, method: str, url: str,
               timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> Dict[str, Any]:
    """
    Perform one request and return the decoded JSON object.

    Args:
        session: Session to send the request with
        method: HTTP method ("GET", "POST")
        url: Endpoint URL
        timeout: Seconds before giving up
        **kwargs: Passed through to session.request (params, json, ...)

    Returns:
        Decoded JSON object

    Raises:
        requests.RequestException: Transport failure or non-2xx status
        MalformedResponseError: Body is not a JSON object
    """
    logger.debug(f"{method} {url}")
    response = session.request(method, url, timeout=timeout, **kwargs)
    response.raise_for_status()

    try:
        payload = response.json()
    except ValueError as e:
        raise MalformedResponseError(f"{url}: response is not JSON ({e})") from e

    if not isinstance(payload, dict):
        raise MalformedResponseError(f"{url}: expected a JSON object, got {type(payload).__name__}")

    return payload


def as_float(value: Any) -> Optional[float]:
    """Coerce a finite JSON number to float; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


def as_text(value: Any) -> Optional[str]:
    """Non-blank stripped string, or None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
