#!/usr/bin/env python3
"""
Insider Locator v1.0.0 - Setup Configuration
============================================

Location spoofing reconnaissance: public IP vs. nearby Wi-Fi location,
VPN/proxy egress and virtual machine indicators.

Installation:
    python setup.py install

    OR (development mode):
    pip install -e .

    Creates 'itl' console script alias globally.

Author: Insider Locator Team
License: MIT
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read long description from README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Core dependencies
REQUIRED_PACKAGES = [
    "requests>=2.28.0",     # IP intelligence, positioning and reverse geocoding lookups
    "jsonschema>=4.0.0",    # Config and offline table validation
    "colorama>=0.4.4",      # Cross-platform colored output
]

# Optional development dependencies
EXTRAS_REQUIRE = {
    "dev": [
        "pytest>=7.0.0",    # Testing
        "pytest-cov>=4.0.0", # Coverage reporting
        "black>=22.0.0",    # Code formatting
        "pylint>=2.14.0",   # Linting
        "mypy>=0.950",      # Type checking
    ],
}

setup(
    # Package Information
    name="insider-locator",
    version="1.0.0",
    author="Insider Locator Team",
    description="Compare IP and Wi-Fi geolocation and flag location spoofing indicators",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Classification
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Information Technology",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet",
        "Topic :: System :: Networking :: Monitoring",
        "Topic :: Security",
    ],

    # Keywords for searching
    keywords=[
        "geolocation",
        "wifi",
        "bssid",
        "vpn-detection",
        "insider-threat",
        "reconnaissance",
        "security",
    ],

    # Package Configuration
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples"]),
    include_package_data=True,

    # Python Version Requirement
    python_requires=">=3.8",

    # Dependencies
    install_requires=REQUIRED_PACKAGES,
    extras_require=EXTRAS_REQUIRE,

    # Entry Points (Console Scripts)
    entry_points={
        "console_scripts": [
            # Creates 'itl' command globally for easy access
            "itl=insider_locator.cli:main",
        ],
    },

    # Data Files
    package_data={
        "insider_locator": [
            "config/offline_table.json",
        ],
    },

    # Additional Metadata
    license="MIT",

    # Zip Safe (False needed for data files)
    zip_safe=False,
)
