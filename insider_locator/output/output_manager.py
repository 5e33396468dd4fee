"""
Insider Locator - Output Manager
================================

Sends a finished LocationReport to the console or to a file, as rendered
text or as JSON.

Author: Insider Locator Team
Version: 1.0.0
"""

import json
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

from ..core.models import LocationReport
from .report_renderer import ConsoleReportRenderer

logger = logging.getLogger(__name__)


# =============================================================================
# OUTPUT FORMATS
# =============================================================================

class OutputFormat(Enum):
    """Supported output formats."""
    CONSOLE = "console"
    JSON = "json"


# =============================================================================
# OUTPUT CONFIGURATION
# =============================================================================

@dataclass
class OutputConfig:
    """Configuration for output manager."""
    format: OutputFormat = OutputFormat.CONSOLE
    output_file: Optional[str] = None
    colors_enabled: bool = True
    pretty_print: bool = True


# =============================================================================
# OUTPUT MANAGER
# =============================================================================

class OutputManager:
    """
    Writes reports in the configured format.

    Usage:
        output = OutputManager(OutputConfig(format=OutputFormat.JSON, output_file="report.json"))
        output.write_report(report)
    """

    def __init__(self, config: Optional[OutputConfig] = None, stream: Optional[TextIO] = None) -> None:
        self.config = config or OutputConfig()
        self.stream = stream or sys.stdout

    def format_report(self, report: LocationReport) -> str:
        if self.config.format == OutputFormat.JSON:
            indent = 2 if self.config.pretty_print else None
            return json.dumps(report.to_dict(), indent=indent, ensure_ascii=False)

        # Colors only make sense on an interactive console
        use_colors = (
            self.config.colors_enabled
            and self.config.output_file is None
            and hasattr(self.stream, "isatty")
            and self.stream.isatty()
        )
        return ConsoleReportRenderer(use_colors=use_colors).render(report)

    def write_report(self, report: LocationReport) -> None:
        """
        Write a report to the output file, or to the stream if none is set.

        Raises:
            OSError: Output file cannot be written
        """
        text = self.format_report(report)

        if self.config.output_file:
            with open(self.config.output_file, 'w', encoding='utf-8') as f:
                f.write(text + "\n")
            logger.info(f"Report written to {self.config.output_file}")
        else:
            self.stream.write(text + "\n")
            self.stream.flush()
