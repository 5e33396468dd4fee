"""
Offline Fallback Table
======================

Static, operator-maintained mapping from known BSSIDs to known places.
Used by the radio geolocator when the positioning service gives no fix.

The table is loaded once at startup and injected where it is needed.
Lookups are case-insensitive on the BSSID.

File format:
    {"entries": [{"identifier": "68:34:21:cb:c2:01",
                  "latitude": 28.6139, "longitude": 77.2090,
                  "display_location": "New Delhi, India"}]}

Author: Insider Locator Team
Version: 1.0.0
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Optional, Union

from jsonschema import Draft7Validator, ValidationError

from .http_client import LocatorError
from .models import AccessPointObservation, OfflineFallbackEntry

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).parent.parent / "config" / "offline_table.json"

OFFLINE_TABLE_SCHEMA = {
    "type": "object",
    "required": ["entries"],
    "properties": {
        "entries": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["identifier", "latitude", "longitude"],
                "properties": {
                    "identifier": {
                        "type": "string",
                        "pattern": r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$"
                    },
                    "latitude": {"type": "number", "minimum": -90, "maximum": 90},
                    "longitude": {"type": "number", "minimum": -180, "maximum": 180},
                    "display_location": {"type": "string"}
                }
            }
        }
    }
}


class OfflineTableError(LocatorError):
    """Raised when an offline table file cannot be loaded."""
    pass


def _key(identifier: str) -> str:
    return identifier.strip().lower().replace("-", ":")


class OfflineFallbackTable:
    """
    Immutable BSSID -> location lookup.

    Usage:
        table = OfflineFallbackTable.from_file("known_aps.json")
        entry = table.first_match(observations)
    """

    def __init__(self, entries: Iterable[OfflineFallbackEntry] = ()):
        mapping: Dict[str, OfflineFallbackEntry] = {}
        for entry in entries:
            key = _key(entry.identifier)
            if key in mapping:
                logger.debug(f"Duplicate offline entry for {key}, keeping the first")
                continue
            mapping[key] = OfflineFallbackEntry(
                identifier=key,
                latitude=float(entry.latitude),
                longitude=float(entry.longitude),
                display_location=entry.display_location,
            )
        self._entries = MappingProxyType(mapping)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and _key(identifier) in self._entries

    def __iter__(self) -> Iterator[OfflineFallbackEntry]:
        return iter(self._entries.values())

    def lookup(self, identifier: str) -> Optional[OfflineFallbackEntry]:
        return self._entries.get(_key(identifier))

    def first_match(self, observations: Iterable[AccessPointObservation]) -> Optional[OfflineFallbackEntry]:
        """First observation in scan order that the table knows; later ones are ignored."""
        for observation in observations:
            entry = self.lookup(observation.identifier)
            if entry is not None:
                return entry
        return None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Any) -> 'OfflineFallbackTable':
        """Build a table from decoded JSON, validating it first."""
        errors = sorted(Draft7Validator(OFFLINE_TABLE_SCHEMA).iter_errors(data), key=str)
        if errors:
            raise OfflineTableError(f"Invalid offline table: {_describe(errors[0])}")

        return cls(
            OfflineFallbackEntry(
                identifier=item["identifier"],
                latitude=item["latitude"],
                longitude=item["longitude"],
                display_location=item.get("display_location", ""),
            )
            for item in data["entries"]
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'OfflineFallbackTable':
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise OfflineTableError(f"Cannot read offline table {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise OfflineTableError(f"Offline table {path} is not valid JSON: {e}") from e

        table = cls.from_dict(data)
        logger.info(f"Loaded {len(table)} offline entries from {path}")
        return table

    @classmethod
    def default(cls) -> 'OfflineFallbackTable':
        """The table shipped with the package."""
        return cls.from_file(DEFAULT_TABLE_PATH)


def _describe(error: ValidationError) -> str:
    location = ".".join(str(part) for part in error.absolute_path)
    return f"{location or '<root>'}: {error.message}"
