#!/usr/bin/env python3
"""
Insider Locator v1.0 - Location Spoofing Reconnaissance Tool
============================================================

Finds where this host says it is (public IP) and where its radio
environment says it is (nearby Wi-Fi), then flags the differences.

USAGE:
    itl [options]

OPTIONS:
    -c, --config <file>          JSON configuration file
    --offline-table <file>       Offline BSSID table (JSON)
    --bssid <mac>                Use this BSSID instead of scanning (repeatable)
    --timeout <sec>              Timeout for every external call
    -of, --output-format <fmt>   console|json
    -o, --output <file>          Write the report to a file
    --no-color                   Disable colors
    -v, --verbose                Debug logging
    -s, --silent                 Errors only
    --init-config <file>         Write a default configuration file and exit
    --version                    Show version

EXIT CODES:
    0   no spoofing indicators
    1   at least one spoofing indicator raised
    2   configuration error

EXAMPLES:
    itl
    itl --bssid 68:34:21:cb:c2:01 -of json
    itl -c itl_config.json --offline-table known_aps.json -o report.json -of json
"""

import argparse
import logging
import sys
from typing import List, Optional

from colorama import init as colorama_init

from . import __version__
from .config.config_manager import ConfigError, ConfigManager, create_default_config
from .core.offline_table import OfflineFallbackTable, OfflineTableError
from .core.pipeline import build_pipeline
from .core.radio_scanner import normalize_identifier, observations_from_identifiers
from .output.console import ConsoleFormatter
from .output.output_manager import OutputConfig, OutputFormat, OutputManager

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

EXIT_CLEAN = 0
EXIT_FLAGGED = 1
EXIT_CONFIG_ERROR = 2

MIN_TIMEOUT = 0.5
MAX_TIMEOUT = 60.0

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


# =============================================================================
# ARGUMENT VALIDATION
# =============================================================================

def validate_timeout_value(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Timeout must be a number, got '{value}'")
    if not MIN_TIMEOUT <= timeout <= MAX_TIMEOUT:
        raise argparse.ArgumentTypeError(f"Timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds")
    return timeout


def validate_bssid(value: str) -> str:
    bssid = normalize_identifier(value)
    if bssid is None:
        raise argparse.ArgumentTypeError(f"Not a BSSID: '{value}' (expected aa:bb:cc:dd:ee:ff)")
    return bssid


# =============================================================================
# SETUP HELPERS
# =============================================================================

def configure_logging(level_name: str, verbose: bool = False, silent: bool = False) -> None:
    """Configure root logging once; logs go to stderr, the report to stdout."""
    if verbose:
        level = logging.DEBUG
    elif silent:
        level = logging.ERROR
    else:
        level = getattr(logging, str(level_name).upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def load_config(args: argparse.Namespace) -> ConfigManager:
    config = ConfigManager(args.config)
    if args.config:
        if not config.load():
            raise ConfigError(f"Config file not found: {args.config}")
    if args.timeout is not None:
        config.set("network.timeout", args.timeout)
    if args.output_format is not None:
        config.set("general.output_format", args.output_format)
    if args.no_color:
        config.set("general.colors_enabled", False)
    return config


def load_offline_table(args: argparse.Namespace, config: ConfigManager) -> OfflineFallbackTable:
    path = args.offline_table or config.get("offline.table_path")
    if path:
        return OfflineFallbackTable.from_file(path)
    return OfflineFallbackTable.default()


# =============================================================================
# ARGUMENT PARSER
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="itl",
        description="Insider Locator - compare IP and Wi-Fi location, flag spoofing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('-c', '--config',
                        default=None,
                        help='JSON configuration file')
    parser.add_argument('--offline-table',
                        default=None,
                        help='Offline BSSID table (JSON)')
    parser.add_argument('--bssid',
                        action='append',
                        type=validate_bssid,
                        default=None,
                        help='Use this BSSID instead of scanning (repeatable)')
    parser.add_argument('--timeout',
                        type=validate_timeout_value,
                        default=None,
                        help='Timeout for every external call (seconds)')

    output_group = parser.add_argument_group('Output')
    output_group.add_argument('-of', '--output-format',
                              choices=[fmt.value for fmt in OutputFormat],
                              default=None,
                              help='Output format')
    output_group.add_argument('-o', '--output',
                              default=None,
                              help='Output file')
    output_group.add_argument('--no-color',
                              action='store_true',
                              help='Disable colors')

    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument('-v', '--verbose',
                                 action='store_true',
                                 help='Verbose')
    verbosity_group.add_argument('-s', '--silent',
                                 action='store_true',
                                 help='Silent')

    parser.add_argument('--init-config',
                        metavar='FILE',
                        default=None,
                        help='Write a default configuration file and exit')
    parser.add_argument('--version',
                        action='version',
                        version=f"%(prog)s {__version__}")

    return parser


# =============================================================================
# MAIN
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    colorama_init()
    args = create_parser().parse_args(argv)
    fmt = ConsoleFormatter(use_colors=sys.stderr.isatty() and not args.no_color)

    if args.init_config:
        try:
            written = create_default_config(args.init_config)
        except ConfigError as e:
            print(fmt.error(str(e)), file=sys.stderr)
            return EXIT_CONFIG_ERROR
        if written:
            print(fmt.success(f"Default configuration written to {args.init_config}"), file=sys.stderr)
            return EXIT_CLEAN
        print(fmt.error(f"Could not write {args.init_config}"), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        config = load_config(args)
        configure_logging(config.get("general.log_level", "WARNING"), args.verbose, args.silent)
        offline_table = load_offline_table(args, config)
    except (ConfigError, OfflineTableError) as e:
        print(fmt.error(str(e)), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    observations = observations_from_identifiers(args.bssid) if args.bssid else None

    pipeline = build_pipeline(config, offline_table)
    try:
        report = pipeline.run(observations)
    finally:
        pipeline.close()

    try:
        output_format = OutputFormat(config.get("general.output_format", "console"))
    except ValueError as e:
        print(fmt.error(f"Bad output format: {e}"), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    output = OutputManager(OutputConfig(
        format=output_format,
        output_file=args.output,
        colors_enabled=bool(config.get("general.colors_enabled", True)),
    ))
    try:
        output.write_report(report)
    except OSError as e:
        print(fmt.error(f"Cannot write report: {e}"), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.output:
        print(fmt.success(f"Report written to {args.output}"), file=sys.stderr)

    return EXIT_CLEAN if report.verdict.is_clean else EXIT_FLAGGED


if __name__ == "__main__":
    sys.exit(main())
