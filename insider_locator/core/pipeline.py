"""
Investigation Pipeline
======================

Runs every acquisition step exactly once, in order, and hands the results
to the spoofing inference engine:

    IP lookup -> Wi-Fi scan -> radio geolocation -> hardware model -> verdict

No step is retried and nothing is kept between runs.

Author: Insider Locator Team
Version: 1.0.0
"""

import logging
from typing import Any, List, Optional, Sequence

import requests

from .hardware import HardwareFingerprinter
from .http_client import create_session
from .ip_locator import IPLocator
from .models import AccessPointObservation, LocationReport
from .offline_table import OfflineFallbackTable
from .radio_geolocator import RadioGeolocator
from .radio_scanner import RadioScanner
from .reverse_geocoder import ReverseGeocoder
from .spoofing_engine import SpoofingInferenceEngine

logger = logging.getLogger(__name__)


class InvestigationPipeline:
    """
    Sequential, single-pass collection and evaluation.

    Attributes:
        ip_locator: Public IP lookup
        scanner: Wi-Fi scanner
        geolocator: Radio geolocator with offline fallback
        fingerprinter: Hardware model lookup
        engine: Spoofing inference engine
        session: Shared HTTP session, closed by close()
    """

    def __init__(self, ip_locator: IPLocator, scanner: RadioScanner,
                 geolocator: RadioGeolocator, fingerprinter: HardwareFingerprinter,
                 engine: SpoofingInferenceEngine,
                 session: Optional[requests.Session] = None):
        self.ip_locator = ip_locator
        self.scanner = scanner
        self.geolocator = geolocator
        self.fingerprinter = fingerprinter
        self.engine = engine
        self.session = session

    def run(self, observations: Optional[Sequence[AccessPointObservation]] = None) -> LocationReport:
        """
        Collect all signals and evaluate them.

        Args:
            observations: Access points to use instead of scanning

        Returns:
            LocationReport for this run
        """
        logger.info("Looking up public IP...")
        ip_result = self.ip_locator.locate()

        if observations is None:
            logger.info("Scanning nearby Wi-Fi networks...")
            observations = self.scanner.scan()
        else:
            logger.info(f"Using {len(observations)} supplied access point(s), skipping scan")
        observations = tuple(observations)

        logger.info("Geolocating access points...")
        radio_result = self.geolocator.locate(observations)

        hardware_model = self.fingerprinter.fingerprint()

        logger.info("Checking for spoofing indicators...")
        verdict = self.engine.evaluate(ip_result, radio_result, hardware_model)

        return LocationReport(
            ip=ip_result,
            observations=observations,
            radio=radio_result,
            hardware_model=hardware_model,
            verdict=verdict,
        )

    def close(self) -> None:
        if self.session is not None:
            self.session.close()


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    return list(value or [])


def build_pipeline(config, offline_table: OfflineFallbackTable) -> InvestigationPipeline:
    """
    Wire every collaborator from configuration.

    Args:
        config: Loaded ConfigManager
        offline_table: Offline fallback table to inject

    Returns:
        Ready-to-run InvestigationPipeline sharing one HTTP session
    """
    timeout = float(config.get("network.timeout", 8.0))
    session = create_session(config.get("network.user_agent", "insider-locator/1.0"))

    reverse_geocoder = ReverseGeocoder(
        session=session,
        url=config.get("services.reverse_geocode_url"),
        timeout=timeout,
        api_key=config.get("services.reverse_geocode_api_key") or None,
    )

    return InvestigationPipeline(
        session=session,
        ip_locator=IPLocator(session=session, url=config.get("services.ip_api_url"), timeout=timeout),
        scanner=RadioScanner(timeout=timeout),
        geolocator=RadioGeolocator(
            session=session,
            url=config.get("services.positioning_url"),
            offline_table=offline_table,
            timeout=timeout,
            api_key=config.get("services.positioning_api_key") or None,
        ),
        fingerprinter=HardwareFingerprinter(timeout=timeout),
        engine=SpoofingInferenceEngine(
            reverse_geocoder=reverse_geocoder,
            anonymization_tokens=_as_list(config.get("detection.anonymization_tokens")),
            virtualization_markers=_as_list(config.get("detection.virtualization_markers")),
        ),
    )
