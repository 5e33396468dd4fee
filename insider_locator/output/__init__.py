from .console import ConsoleFormatter, ConsoleColors
from .report_renderer import ConsoleReportRenderer
from .output_manager import OutputManager, OutputConfig, OutputFormat

__all__ = [
    'ConsoleFormatter',
    'ConsoleColors',
    'ConsoleReportRenderer',
    'OutputManager',
    'OutputConfig',
    'OutputFormat',
]
