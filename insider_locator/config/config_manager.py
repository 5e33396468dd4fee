#!/usr/bin/env python3
"""
Configuration Manager for Insider Locator

Features:
- JSON configuration file
- Environment variable overrides (ITL_ prefix)
- Schema validation with jsonschema
- Default values for every setting
"""

import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""
    pass


class ConfigSchema:
    """Configuration schema with validation"""

    SCHEMA = {
        "type": "object",
        "required": ["version", "general", "network", "services", "detection", "offline"],
        "properties": {
            "version": {"type": "string", "pattern": r"^\d+\.\d+\.\d+$"},
            "general": {
                "type": "object",
                "required": ["log_level", "output_format"],
                "properties": {
                    "log_level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR"]},
                    "output_format": {"type": "string", "enum": ["console", "json"]},
                    "colors_enabled": {"type": "boolean"}
                }
            },
            "network": {
                "type": "object",
                "required": ["timeout"],
                "properties": {
                    "timeout": {"type": "number", "minimum": 0.5, "maximum": 60.0},
                    "user_agent": {"type": "string", "minLength": 1}
                }
            },
            "services": {
                "type": "object",
                "required": ["ip_api_url", "positioning_url", "reverse_geocode_url"],
                "properties": {
                    "ip_api_url": {"type": "string", "pattern": "^https?://"},
                    "positioning_url": {"type": "string", "pattern": "^https?://"},
                    "positioning_api_key": {"type": "string"},
                    "reverse_geocode_url": {"type": "string", "pattern": "^https?://"},
                    "reverse_geocode_api_key": {"type": "string"}
                }
            },
            "detection": {
                "type": "object",
                "required": ["anonymization_tokens", "virtualization_markers"],
                "properties": {
                    "anonymization_tokens": {"type": "array", "items": {"type": "string"}},
                    "virtualization_markers": {"type": "array", "items": {"type": "string"}}
                }
            },
            "offline": {
                "type": "object",
                "properties": {
                    "table_path": {"type": "string"}
                }
            }
        }
    }

    @staticmethod
    def get_defaults() -> Dict[str, Any]:
        """Return default configuration"""
        return {
            "version": "1.0.0",
            "general": {
                "log_level": "WARNING",
                "output_format": "console",
                "colors_enabled": True
            },
            "network": {
                "timeout": 8.0,
                "user_agent": "insider-locator/1.0"
            },
            "services": {
                "ip_api_url": "http://ip-api.com/json",
                "positioning_url": "https://api.beacondb.net/v1/geolocate",
                "positioning_api_key": "",
                "reverse_geocode_url": "https://geocode.maps.co/reverse",
                "reverse_geocode_api_key": ""
            },
            "detection": {
                "anonymization_tokens": [
                    "vpn", "proxy", "cloudflare", "digitalocean", "linode", "aws", "azure"
                ],
                "virtualization_markers": ["VirtualBox", "VMware", "KVM"]
            },
            "offline": {
                # empty: use the table shipped with the package
                "table_path": ""
            }
        }


class ConfigManager:
    """
    Configuration manager with file, env, and validation support

    Usage:
        config = ConfigManager("itl_config.json")
        config.load()
        timeout = config.get("network.timeout")
        config.set("general.log_level", "DEBUG")
        config.save()
    """

    ENV_PREFIX = "ITL_"

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_file: Path to JSON config file (default: itl_config.json)

        Raises:
            ConfigError: An ITL_* environment override is invalid
        """
        self.config_file = config_file or "itl_config.json"
        self.validator = Draft7Validator(ConfigSchema.SCHEMA)
        self.modified = False

        config = ConfigSchema.get_defaults()
        self._apply_env_overrides(config)
        self.validate(config)
        self.config = config

    def load(self, config_file: Optional[str] = None) -> bool:
        """
        Load configuration from file

        Args:
            config_file: Optional path override

        Returns:
            True if a file was loaded, False if it does not exist

        Raises:
            ConfigError: File exists but is unreadable or invalid
        """
        if config_file:
            self.config_file = config_file

        path = Path(self.config_file)

        if not path.exists():
            logger.info(f"Config file not found: {self.config_file}, using defaults")
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config parse error in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Config load error for {path}: {e}") from e

        if not isinstance(loaded_config, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        # Merge with defaults (deep merge)
        merged = ConfigSchema.get_defaults()
        self._merge_config(merged, loaded_config)
        self._apply_env_overrides(merged)
        self.validate(merged)

        self.config = merged
        logger.info(f"Config loaded: {self.config_file}")
        return True

    def save(self, config_file: Optional[str] = None) -> bool:
        """
        Save configuration to file

        Args:
            config_file: Optional path override

        Returns:
            True if saved successfully
        """
        if config_file:
            self.config_file = config_file

        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error(f"Config save error: {e}")
            return False

        logger.info(f"Config saved: {self.config_file}")
        self.modified = False
        return True

    def _merge_config(self, base: Dict, override: Dict) -> None:
        """Deep merge configuration"""
        for key, value in override.items():
            if (key in base and
                    isinstance(base[key], dict) and
                    isinstance(value, dict)):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def validate(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Validate configuration against schema

        Raises:
            ConfigError: Describing the first problem found
        """
        data = self.config if config is None else config
        errors = sorted(self.validator.iter_errors(data), key=lambda e: list(e.absolute_path))
        if errors:
            error = errors[0]
            location = ".".join(str(part) for part in error.absolute_path) or "<root>"
            raise ConfigError(f"{location}: {error.message}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Args:
            key: Configuration key (e.g., "network.timeout")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        # Environment overrides are already merged in and validated
        # Navigate through config
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return deepcopy(value)

    def _leaf_keys(self, node: Dict[str, Any], prefix: str = "") -> List[str]:
        """Dotted paths of every non-dict value under node"""
        keys = []
        for name, value in node.items():
            path = f"{prefix}{name}"
            if isinstance(value, dict):
                keys.extend(self._leaf_keys(value, path + "."))
            else:
                keys.append(path)
        return keys

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        """Overwrite known settings from ITL_* environment variables"""
        for key in self._leaf_keys(config):
            env_value = os.environ.get(self.ENV_PREFIX + key.upper().replace(".", "_"))
            if env_value is None:
                continue
            parts = key.split(".")
            parent = config
            for part in parts[:-1]:
                parent = parent[part]
            parent[parts[-1]] = self._parse_env_value(env_value, parent[parts[-1]])
            logger.debug(f"{key} overridden from environment")

    def _parse_env_value(self, value: str, current: Any) -> Any:
        """
        Parse environment variable value, guided by the type it replaces.

        Values that do not parse are returned as the raw string so that
        validation reports them.
        """
        # Boolean
        if isinstance(current, bool):
            if value.lower() in ("true", "yes", "1"):
                return True
            if value.lower() in ("false", "no", "0"):
                return False
            return value

        # Comma separated list
        if isinstance(current, list):
            return [item.strip() for item in value.split(",") if item.strip()]

        # Number
        if isinstance(current, (int, float)):
            try:
                return int(value)
            except ValueError:
                pass
            try:
                return float(value)
            except ValueError:
                return value

        # String
        return value

    def set(self, key: str, value: Any) -> bool:
        """
        Set configuration value using dot notation

        Args:
            key: Configuration key
            value: Value to set

        Returns:
            True if successful
        """
        keys = key.split(".")

        # Navigate to parent
        current = self.config
        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]

        # Set value
        current[keys[-1]] = value
        self.modified = True
        return True


def create_default_config(filename: str = "itl_config.json") -> bool:
    """Create default configuration file"""
    config = ConfigManager(filename)
    config.config = ConfigSchema.get_defaults()
    return config.save()


if __name__ == "__main__":
    # Create default config
    create_default_config()
