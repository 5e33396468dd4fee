"""
Hardware Fingerprinter
======================

Reads the machine's hardware model string. Virtual machines usually give
themselves away here ("VMware7,1", "VirtualBox", "KVM").

An empty string means "no signal", never an error.

Author: Insider Locator Team
Version: 1.0.0
"""

import logging
import subprocess  # nosec B404 - subprocess needed to query the hardware model
import sys
from pathlib import Path
from typing import Callable, List

from .http_client import DEFAULT_TIMEOUT
from .radio_scanner import decode_output

logger = logging.getLogger(__name__)

DMI_ROOT = "/sys/class/dmi/id"
DMI_FIELDS = ("sys_vendor", "product_name")

MODEL_COMMANDS = {
    "darwin": ["sysctl", "-n", "hw.model"],
    "win32": ["wmic", "computersystem", "get", "manufacturer,model", "/value"],
}


def parse_wmic_output(text: str) -> str:
    """Join the values of `wmic ... /value` key=value lines."""
    values = []
    for line in text.splitlines():
        if "=" in line:
            value = line.split("=", 1)[1].strip()
            if value:
                values.append(value)
    return " ".join(values)


class HardwareFingerprinter:
    """
    Platform specific hardware model lookup.

    Attributes:
        platform: sys.platform style identifier
        timeout: Seconds to wait for helper commands
        runner: subprocess.run compatible callable
        dmi_root: Directory holding Linux DMI attributes
    """

    def __init__(self, platform: str = sys.platform, timeout: float = DEFAULT_TIMEOUT,
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
                 dmi_root: str = DMI_ROOT):
        self.platform = "linux" if platform.startswith("linux") else platform
        self.timeout = timeout
        self.runner = runner
        self.dmi_root = Path(dmi_root)

    def fingerprint(self) -> str:
        if self.platform == "linux":
            model = self._read_dmi()
        elif self.platform in MODEL_COMMANDS:
            model = self._run(MODEL_COMMANDS[self.platform])
        else:
            logger.debug(f"No hardware model source for {self.platform}")
            model = ""

        logger.info(f"Hardware model: {model or 'unknown'}")
        return model

    def _read_dmi(self) -> str:
        parts: List[str] = []
        for name in DMI_FIELDS:
            try:
                value = (self.dmi_root / name).read_text(encoding="utf-8", errors="replace").strip()
            except OSError as e:
                logger.debug(f"Cannot read DMI field {name}: {e}")
                continue
            if value:
                parts.append(value)
        return " ".join(parts)

    def _run(self, command: List[str]) -> str:
        try:
            # nosec B603 - fixed argument list, no shell
            result = self.runner(command, capture_output=True, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError, UnicodeDecodeError) as e:
            logger.debug(f"{command[0]} failed: {e}")
            return ""

        if result.returncode != 0:
            logger.debug(f"{command[0]} exited with status {result.returncode}")
            return ""

        output = decode_output(result.stdout)
        if self.platform == "win32":
            return parse_wmic_output(output)
        return output.strip()
