"""
Spoofing Inference Engine
=========================

Combines the IP result, the radio result and the hardware model into a
SpoofingVerdict. Four rules, evaluated independently:

    R1  MozillaLocationFailed  radio lookup was attempted and produced no
                               fix (remote failed, offline table missed)
    R2  LocationMismatch       IP country differs from the country of the
                               radio fix; only checked when R1 did not fire
    R3  PossibleVPN            ISP/org contains an anonymization token
    R4  KVMDetected            hardware model contains a virtualization
                               marker

An offline fix suppresses R1 and is compared by R2 like a remote fix. An
empty scan never fires R1: there was nothing to fail on.

The engine holds no per-call state. Its only I/O is the injected reverse
geocoder used by R2; when that fails R2 is skipped.

Author: Insider Locator Team
Version: 1.0.0
"""

import logging
from typing import Iterable, List, Optional, Protocol, Tuple

from .models import Flag, IPLocationResult, RadioLocationResult, SpoofingVerdict

logger = logging.getLogger(__name__)

# Substrings of ISP/org names that suggest hosted or anonymized egress.
# Cloud-hosted residential ISPs will trip these; that noise is accepted.
DEFAULT_ANONYMIZATION_TOKENS: Tuple[str, ...] = (
    "vpn", "proxy", "cloudflare", "digitalocean", "linode", "aws", "azure",
)

DEFAULT_VIRTUALIZATION_MARKERS: Tuple[str, ...] = (
    "VirtualBox", "VMware", "KVM",
)


class CountryResolver(Protocol):
    def country_for(self, latitude: float, longitude: float) -> Optional[str]:
        ...


def _clean(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(value.strip().lower() for value in values if value and value.strip())


def _first_hit(haystack: str, needles: Tuple[str, ...]) -> Optional[str]:
    lowered = haystack.lower()
    for needle in needles:
        if needle in lowered:
            return needle
    return None


def _same_country(left: str, right: str) -> bool:
    return left.strip().casefold() == right.strip().casefold()


class SpoofingInferenceEngine:
    """
    Deterministic rule set over the collected signals.

    Usage:
        engine = SpoofingInferenceEngine(reverse_geocoder=ReverseGeocoder())
        verdict = engine.evaluate(ip_result, radio_result, hardware_model)
    """

    def __init__(self, reverse_geocoder: Optional[CountryResolver] = None,
                 anonymization_tokens: Iterable[str] = DEFAULT_ANONYMIZATION_TOKENS,
                 virtualization_markers: Iterable[str] = DEFAULT_VIRTUALIZATION_MARKERS):
        """
        Args:
            reverse_geocoder: Resolves a radio fix to a country; without
                one the mismatch rule never runs
            anonymization_tokens: ISP/org substrings for PossibleVPN
            virtualization_markers: Hardware model substrings for KVMDetected
        """
        self.reverse_geocoder = reverse_geocoder
        self.anonymization_tokens = _clean(anonymization_tokens)
        self.virtualization_markers = _clean(virtualization_markers)

    def evaluate(self, ip_result: IPLocationResult, radio_result: RadioLocationResult,
                 hardware_model: str) -> SpoofingVerdict:
        reasons: List[Tuple[Flag, str]] = []
        radio_country: Optional[str] = None

        # R1 / R2 are exclusive: a failed fix cannot be compared
        if self._remote_location_failed(radio_result):
            reasons.append((
                Flag.REMOTE_LOCATION_FAILED,
                "Access points were found but neither the positioning service "
                "nor the offline table could place them",
            ))
        else:
            radio_country, mismatch = self._check_mismatch(ip_result, radio_result)
            if mismatch:
                reasons.append((
                    Flag.LOCATION_MISMATCH,
                    f"IP geolocates to {ip_result.country} but nearby Wi-Fi "
                    f"places the host in {radio_country}",
                ))

        token = self._anonymization_hit(ip_result)
        if token is not None:
            reasons.append((
                Flag.POSSIBLE_VPN,
                f"ISP/org '{ip_result.isp_org}' matches '{token}'",
            ))

        marker = self._virtualization_hit(hardware_model)
        if marker is not None:
            reasons.append((
                Flag.VIRTUALIZATION_DETECTED,
                f"Hardware model '{hardware_model}' matches '{marker}'",
            ))

        verdict = SpoofingVerdict(
            flags=frozenset(flag for flag, _ in reasons),
            reasons=tuple(reasons),
            radio_country=radio_country,
        )
        logger.info(f"Verdict: {', '.join(flag.value for flag in verdict) or 'clean'}")
        return verdict

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    @staticmethod
    def _remote_location_failed(radio_result: RadioLocationResult) -> bool:
        return not radio_result.has_fix and radio_result.remote_attempted

    def _check_mismatch(self, ip_result: IPLocationResult,
                        radio_result: RadioLocationResult) -> Tuple[Optional[str], bool]:
        if not radio_result.has_fix:
            return None, False
        if not ip_result.available or not ip_result.country:
            logger.debug("Mismatch check skipped: no IP country")
            return None, False
        if self.reverse_geocoder is None:
            logger.debug("Mismatch check skipped: no reverse geocoder")
            return None, False

        try:
            radio_country = self.reverse_geocoder.country_for(radio_result.latitude, radio_result.longitude)
        except Exception as e:
            # Resolver failure skips the rule, it never raises a flag
            logger.warning(f"Mismatch check skipped: reverse geocoding failed: {e}")
            return None, False
        if not radio_country:
            logger.debug("Mismatch check skipped: radio fix has no country")
            return None, False

        return radio_country, not _same_country(ip_result.country, radio_country)

    def _anonymization_hit(self, ip_result: IPLocationResult) -> Optional[str]:
        if not ip_result.available or not ip_result.isp_org:
            return None
        return _first_hit(ip_result.isp_org, self.anonymization_tokens)

    def _virtualization_hit(self, hardware_model: str) -> Optional[str]:
        if not hardware_model:
            return None
        return _first_hit(hardware_model, self.virtualization_markers)
