"""
Core module initialization for Insider Locator.
"""

from .models import (
    AccessPointObservation,
    Availability,
    Flag,
    IPLocationResult,
    LocationReport,
    OfflineFallbackEntry,
    RadioLocationResult,
    RadioSource,
    SpoofingVerdict,
)
from .offline_table import OfflineFallbackTable, OfflineTableError
from .spoofing_engine import SpoofingInferenceEngine
from .pipeline import InvestigationPipeline, build_pipeline

__all__ = [
    'AccessPointObservation',
    'Availability',
    'Flag',
    'IPLocationResult',
    'LocationReport',
    'OfflineFallbackEntry',
    'RadioLocationResult',
    'RadioSource',
    'SpoofingVerdict',
    'OfflineFallbackTable',
    'OfflineTableError',
    'SpoofingInferenceEngine',
    'InvestigationPipeline',
    'build_pipeline',
]
