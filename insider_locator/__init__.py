"""
Insider Locator v1.0.0 - Location Spoofing Reconnaissance Tool
=============================================================

Compares where a host's public IP says it is with where its nearby Wi-Fi
access points say it is, and flags signs of location or identity
spoofing (VPN/proxy egress, virtual machines, country mismatch).

Usage:
    from insider_locator import cli
    from insider_locator.core import SpoofingInferenceEngine
    from insider_locator.output import OutputManager

Author: Insider Locator Team
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Insider Locator Team"

from insider_locator.core.models import Flag, LocationReport, SpoofingVerdict
from insider_locator.core.spoofing_engine import SpoofingInferenceEngine

__all__ = [
    'Flag',
    'LocationReport',
    'SpoofingVerdict',
    'SpoofingInferenceEngine',
    '__version__',
]
