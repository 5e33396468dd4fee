"""
Radio Scanner
=============

Enumerates nearby Wi-Fi access points by running the platform's own
listing tool and scraping its output.

Supported tools:
- macOS:   system_profiler SPAirPortDataType -json
- Linux:   nmcli -t -f BSSID,SSID,SIGNAL dev wifi list
- Windows: netsh wlan show networks mode=bssid

Parsers are plain functions over text so they can be tested without the
tool installed. scan() never raises: a missing adapter, a missing tool or
unreadable output all come back as an empty list.

Author: Insider Locator Team
Version: 1.0.0
"""

import json
import logging
import re
import subprocess  # nosec B404 - subprocess needed to query the wireless stack
import sys
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .http_client import DEFAULT_TIMEOUT
from .models import AccessPointObservation

logger = logging.getLogger(__name__)

MAC_PATTERN = re.compile(r'^([0-9a-f]{2}:){5}[0-9a-f]{2}$')
DBM_PATTERN = re.compile(r'(-?\d+)\s*dBm')

SCAN_COMMANDS = {
    "darwin": ["system_profiler", "SPAirPortDataType", "-json"],
    "linux": ["nmcli", "-t", "-f", "BSSID,SSID,SIGNAL", "dev", "wifi", "list"],
    "win32": ["netsh", "wlan", "show", "networks", "mode=bssid"],
}


# =============================================================================
# NORMALIZATION HELPERS
# =============================================================================

def decode_output(raw: Any) -> str:
    """Command output as text; undecodable bytes become U+FFFD."""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw or ""


def normalize_identifier(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a BSSID to lowercase colon form.

    Returns None for empty, redacted or otherwise non-MAC values.
    """
    if not raw:
        return None
    candidate = raw.strip().lower().replace("-", ":")
    if MAC_PATTERN.match(candidate):
        return candidate
    return None


def dbm_to_quality(dbm: int) -> int:
    """Map an RSSI in dBm onto a 0-100 quality percentage."""
    return max(0, min(100, 2 * (dbm + 100)))


def quality_to_dbm(quality: int) -> int:
    """Map a 0-100 quality percentage back to an approximate RSSI."""
    return quality // 2 - 100


def _parse_percent(raw: str) -> Optional[int]:
    try:
        value = int(raw.strip().rstrip("%"))
    except ValueError:
        return None
    if 0 <= value <= 100:
        return value
    return None


def _build(identifier: Optional[str], name: str,
           quality: Optional[int]) -> Optional[AccessPointObservation]:
    bssid = normalize_identifier(identifier)
    if bssid is None:
        logger.debug(f"Skipping access point with unusable BSSID {identifier!r}")
        return None
    return AccessPointObservation(identifier=bssid, display_name=name or "", signal_quality=quality)


def observations_from_identifiers(identifiers: Iterable[str]) -> List[AccessPointObservation]:
    """Observations for operator-supplied BSSIDs (no name, no signal)."""
    observations = []
    for raw in identifiers:
        observation = _build(raw, "", None)
        if observation is not None:
            observations.append(observation)
    return observations


# =============================================================================
# PARSERS
# =============================================================================

def _iter_profiler_networks(node: Any) -> Iterator[Dict[str, Any]]:
    """Yield network dicts from either a list, a single network or an SSID map."""
    if isinstance(node, list):
        for item in node:
            yield from _iter_profiler_networks(item)
    elif isinstance(node, dict):
        if "_name" in node or "spairport_network_bssid" in node:
            yield node
        else:
            # older layout: {ssid: {details}}
            for ssid, info in node.items():
                if isinstance(info, dict):
                    yield dict(info, _name=info.get("_name", ssid))


def parse_system_profiler_json(text: str) -> List[AccessPointObservation]:
    """Parse `system_profiler SPAirPortDataType -json` output."""
    data = json.loads(text)
    observations: List[AccessPointObservation] = []

    for item in data.get("SPAirPortDataType", []):
        for interface in item.get("spairport_airport_interfaces", []):
            sections = (
                interface.get("spairport_current_network_information", {}),
                interface.get("spairport_airport_other_local_wireless_networks", []),
            )
            for section in sections:
                for network in _iter_profiler_networks(section):
                    quality = None
                    match = DBM_PATTERN.search(str(network.get("spairport_signal_noise", "")))
                    if match:
                        quality = dbm_to_quality(int(match.group(1)))
                    observation = _build(
                        network.get("spairport_network_bssid"),
                        str(network.get("_name", "")),
                        quality,
                    )
                    if observation is not None:
                        observations.append(observation)

    return observations


def _split_terse(line: str) -> List[str]:
    """Split an nmcli terse line on unescaped colons."""
    fields = []
    current = []
    chars = iter(line)
    for char in chars:
        if char == "\\":
            current.append(next(chars, ""))
        elif char == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def parse_nmcli_output(text: str) -> List[AccessPointObservation]:
    """Parse `nmcli -t -f BSSID,SSID,SIGNAL dev wifi list` output."""
    observations = []
    for line in text.splitlines():
        if not line.strip():
            continue
        fields = _split_terse(line)
        if len(fields) < 3:
            logger.debug(f"Skipping short nmcli line: {line!r}")
            continue
        # SSID may itself have been split if nmcli left a colon unescaped
        bssid, signal = fields[0], fields[-1]
        ssid = ":".join(fields[1:-1])
        observation = _build(bssid, ssid, _parse_percent(signal))
        if observation is not None:
            observations.append(observation)
    return observations


NETSH_SSID = re.compile(r'^\s*SSID\s+\d+\s*:\s?(.*)$')
NETSH_BSSID = re.compile(r'^\s*BSSID\s+\d+\s*:\s*(\S+)')
NETSH_SIGNAL = re.compile(r'^\s*Signal\s*:\s*(\d+)\s*%')


def parse_netsh_output(text: str) -> List[AccessPointObservation]:
    """Parse `netsh wlan show networks mode=bssid` output."""
    observations = []
    ssid = ""
    pending: Optional[Dict[str, Any]] = None

    def flush():
        if pending is not None:
            observation = _build(pending["bssid"], pending["ssid"], pending["signal"])
            if observation is not None:
                observations.append(observation)

    for line in text.splitlines():
        ssid_match = NETSH_SSID.match(line)
        if ssid_match:
            flush()
            pending = None
            ssid = ssid_match.group(1).strip()
            continue

        bssid_match = NETSH_BSSID.match(line)
        if bssid_match:
            flush()
            pending = {"bssid": bssid_match.group(1), "ssid": ssid, "signal": None}
            continue

        signal_match = NETSH_SIGNAL.match(line)
        if signal_match and pending is not None and pending["signal"] is None:
            pending["signal"] = _parse_percent(signal_match.group(1))

    flush()
    return observations


PARSERS: Dict[str, Callable[[str], List[AccessPointObservation]]] = {
    "darwin": parse_system_profiler_json,
    "linux": parse_nmcli_output,
    "win32": parse_netsh_output,
}


# =============================================================================
# SCANNER
# =============================================================================

class RadioScanner:
    """
    Runs the platform scan command once and parses its output.

    Attributes:
        platform: sys.platform style identifier
        timeout: Seconds to wait for the scan command
        runner: subprocess.run compatible callable
    """

    def __init__(self, platform: str = sys.platform, timeout: float = DEFAULT_TIMEOUT,
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        self.platform = "linux" if platform.startswith("linux") else platform
        self.timeout = timeout
        self.runner = runner

    def scan(self) -> List[AccessPointObservation]:
        command = SCAN_COMMANDS.get(self.platform)
        if command is None:
            logger.warning(f"Wi-Fi scanning not supported on {self.platform}")
            return []

        try:
            # nosec B603 - fixed argument list, no shell
            result = self.runner(command, capture_output=True, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError, UnicodeDecodeError) as e:
            logger.warning(f"Wi-Fi scan command failed: {e}")
            return []

        if result.returncode != 0:
            logger.warning(f"{command[0]} exited with status {result.returncode}")
            return []

        try:
            observations = PARSERS[self.platform](decode_output(result.stdout))
        except (ValueError, AttributeError, TypeError) as e:
            logger.warning(f"Could not parse {command[0]} output: {e}")
            return []

        logger.info(f"Found {len(observations)} access point(s)")
        return observations
