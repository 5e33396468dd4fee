"""
Data Model for Insider Locator
==============================

Plain dataclasses shared by every acquisition step, the spoofing
inference engine and the report renderers. Every instance lives for one
scan-and-report cycle only.

Author: Insider Locator Team
Version: 1.0.0
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, Optional, Tuple


# =============================================================================
# SIGNAL AVAILABILITY
# =============================================================================

class Availability(Enum):
    """Tri-state outcome of a data source."""
    SUCCESS = "success"
    UNAVAILABLE = "unavailable"   # source failed or answered garbage
    NO_SIGNAL = "no_signal"       # nothing to report, not a failure


class RadioSource(Enum):
    """Where a radio-based fix came from."""
    REMOTE = "remote"
    OFFLINE = "offline"
    NONE = "none"


# =============================================================================
# ACQUISITION RESULTS
# =============================================================================

@dataclass(frozen=True)
class AccessPointObservation:
    """
    One wireless access point seen during a scan.

    Attributes:
        identifier: BSSID, lowercase colon-separated hex
        display_name: SSID as reported (may be empty or redacted)
        signal_quality: Signal quality in percent, None if not reported
    """
    identifier: str
    display_name: str = ""
    signal_quality: Optional[int] = None


@dataclass(frozen=True)
class IPLocationResult:
    """
    Public IP and coarse location from an IP-intelligence lookup.

    Any field may be None even on success; the service is allowed to
    omit data.
    """
    status: Availability
    public_ip: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    isp_org: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def unavailable(cls) -> 'IPLocationResult':
        return cls(status=Availability.UNAVAILABLE)

    @property
    def available(self) -> bool:
        return self.status == Availability.SUCCESS

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class OfflineFallbackEntry:
    """A known access point pinned to a known place."""
    identifier: str
    latitude: float
    longitude: float
    display_location: str = ""


@dataclass(frozen=True)
class RadioLocationResult:
    """
    Best-effort location derived from nearby access points.

    Attributes:
        source: REMOTE, OFFLINE or NONE (no fix at all)
        latitude: Fix latitude, None when source is NONE
        longitude: Fix longitude, None when source is NONE
        accuracy_meters: Accuracy radius reported by the positioning
            service; None for offline estimates
        display_location: Label of the matched offline table entry
        remote_attempted: True when the positioning service was queried
    """
    source: RadioSource
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy_meters: Optional[float] = None
    display_location: Optional[str] = None
    remote_attempted: bool = False

    @classmethod
    def no_fix(cls, remote_attempted: bool) -> 'RadioLocationResult':
        return cls(source=RadioSource.NONE, remote_attempted=remote_attempted)

    @classmethod
    def remote(cls, latitude: float, longitude: float,
               accuracy_meters: Optional[float] = None) -> 'RadioLocationResult':
        return cls(
            source=RadioSource.REMOTE,
            latitude=latitude,
            longitude=longitude,
            accuracy_meters=accuracy_meters,
            remote_attempted=True,
        )

    @classmethod
    def offline(cls, entry: OfflineFallbackEntry) -> 'RadioLocationResult':
        return cls(
            source=RadioSource.OFFLINE,
            latitude=entry.latitude,
            longitude=entry.longitude,
            display_location=entry.display_location or None,
            remote_attempted=True,
        )

    @property
    def has_fix(self) -> bool:
        return self.source != RadioSource.NONE

    @property
    def is_offline_estimate(self) -> bool:
        return self.source == RadioSource.OFFLINE

    @property
    def status(self) -> Availability:
        if self.has_fix:
            return Availability.SUCCESS
        if self.remote_attempted:
            return Availability.UNAVAILABLE
        return Availability.NO_SIGNAL


# =============================================================================
# VERDICT
# =============================================================================

class Flag(Enum):
    """Spoofing indicators. Values are the names shown to operators."""
    REMOTE_LOCATION_FAILED = "MozillaLocationFailed"
    LOCATION_MISMATCH = "LocationMismatch"
    POSSIBLE_VPN = "PossibleVPN"
    VIRTUALIZATION_DETECTED = "KVMDetected"


# Rule order, used for stable iteration and rendering
FLAG_ORDER: Tuple[Flag, ...] = tuple(Flag)


@dataclass(frozen=True)
class SpoofingVerdict:
    """
    Set of raised flags plus the evidence behind each one.

    Attributes:
        flags: Raised flags
        reasons: (flag, explanation) pairs in rule order
        radio_country: Country derived for the radio fix, if the
            mismatch check got that far
    """
    flags: FrozenSet[Flag] = frozenset()
    reasons: Tuple[Tuple[Flag, str], ...] = ()
    radio_country: Optional[str] = None

    def __post_init__(self):
        if (Flag.REMOTE_LOCATION_FAILED in self.flags
                and Flag.LOCATION_MISMATCH in self.flags):
            raise ValueError(
                "MozillaLocationFailed and LocationMismatch are mutually exclusive"
            )

    def __contains__(self, flag: object) -> bool:
        return flag in self.flags

    def __iter__(self) -> Iterator[Flag]:
        return (flag for flag in FLAG_ORDER if flag in self.flags)

    def __len__(self) -> int:
        return len(self.flags)

    @property
    def is_clean(self) -> bool:
        return not self.flags

    def reason_for(self, flag: Flag) -> Optional[str]:
        for raised, reason in self.reasons:
            if raised == flag:
                return reason
        return None


# =============================================================================
# REPORT
# =============================================================================

def maps_url(latitude: float, longitude: float) -> str:
    """Google Maps link for a coordinate pair."""
    return f"https://maps.google.com?q={latitude},{longitude}"


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class LocationReport:
    """Everything one run found out, ready for rendering."""
    ip: IPLocationResult
    observations: Tuple[AccessPointObservation, ...]
    radio: RadioLocationResult
    hardware_model: str
    verdict: SpoofingVerdict
    generated_at: str = field(default_factory=_utc_now)

    @property
    def hardware_status(self) -> Availability:
        return Availability.SUCCESS if self.hardware_model else Availability.NO_SIGNAL

    @property
    def scan_status(self) -> Availability:
        return Availability.SUCCESS if self.observations else Availability.NO_SIGNAL

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        ip = self.ip
        radio = self.radio
        return {
            "generated_at": self.generated_at,
            "ip": {
                "status": ip.status.value,
                "public_ip": ip.public_ip,
                "city": ip.city,
                "region": ip.region,
                "country": ip.country,
                "isp_org": ip.isp_org,
                "latitude": ip.latitude,
                "longitude": ip.longitude,
                "maps_url": maps_url(ip.latitude, ip.longitude) if ip.has_coordinates else None,
            },
            "access_points": [
                {
                    "identifier": ap.identifier,
                    "display_name": ap.display_name,
                    "signal_quality": ap.signal_quality,
                }
                for ap in self.observations
            ],
            "radio": {
                "status": radio.status.value,
                "source": radio.source.value,
                "latitude": radio.latitude,
                "longitude": radio.longitude,
                "accuracy_meters": radio.accuracy_meters,
                "offline_estimate": radio.is_offline_estimate,
                "display_location": radio.display_location,
                "country": self.verdict.radio_country,
                "maps_url": maps_url(radio.latitude, radio.longitude) if radio.has_fix else None,
            },
            "hardware_model": self.hardware_model or None,
            "flags": [flag.value for flag in self.verdict],
            "reasons": {flag.value: reason for flag, reason in self.verdict.reasons},
        }
