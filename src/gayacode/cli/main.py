"""
Command-line interface for the GayaCode environmental analyzer.

This module provides the ``gayacode`` entry point with three commands:

- ``analyze``: run a script under monitoring and write its report
- ``validate``: check that a script can be analysed
- ``config``: show the effective configuration

The exit code of ``analyze`` tells the four execution outcomes apart.
"""

import argparse
import dataclasses
import json
import logging
import sys
import webbrowser
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..analysis import EnvironmentalAnalyzer
from ..config import get_config, get_config_info, set_config_path
from ..config.validators import OUTPUT_FORMATS
from ..models.config import AppConfig
from ..models.execution import OutcomeStatus
from ..models.results import AnalysisResult
from ..report import DashboardGenerator
from ..storage import ParquetStorage, ResultStorageManager
from ..utils.formatters import format_co2, format_duration, format_energy
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_positive_float,
    validate_script_path,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

EXIT_CODES = {
    OutcomeStatus.COMPLETED: 0,
    OutcomeStatus.SPAWN_FAILED: 2,
    OutcomeStatus.TIMED_OUT: 3,
    OutcomeStatus.SIGNALED: 4,
}
EXIT_USAGE_ERROR = 1
EXIT_INTERRUPTED = 130


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging on stdout (DEBUG when verbose)."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
    )
    logging.getLogger().setLevel(level)


def _add_config_option(subparser: argparse.ArgumentParser) -> None:
    # SUPPRESS keeps a --config given before the command from being reset
    subparser.add_argument(
        "--config", type=Path, default=argparse.SUPPRESS,
        help="Path to an alternative config.toml.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gayacode",
        description="Measure the resource usage and environmental impact of a script.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--config", type=Path, help="Path to an alternative config.toml.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyse a script and generate a report.")
    analyze.add_argument("script", type=Path, help="Script to analyse.")
    analyze.add_argument(
        "-o", "--output", type=Path,
        help="Output directory of the report (default from config: ./gayacode-report).",
    )
    analyze.add_argument("--no-open", action="store_true", help="Do not open the report in a browser.")
    analyze.add_argument("--emission-factor", type=float, help="Grid emission factor in g CO2/kWh.")
    analyze.add_argument("--timeout", type=float, help="Maximum runtime in milliseconds.")
    analyze.add_argument("--interval", type=float, help="Sampling interval in milliseconds.")
    analyze.add_argument("--format", choices=OUTPUT_FORMATS, help="Report format.")
    _add_config_option(analyze)

    validate = subparsers.add_parser("validate", help="Check that a script can be analysed.")
    validate.add_argument("script", type=Path, help="Script to check.")

    config = subparsers.add_parser("config", help="Show the effective configuration.")
    _add_config_option(config)
    return parser


def apply_overrides(app_config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Return a copy of ``app_config`` with the command-line overrides applied.

    Raises:
        ValidationError: If an override value is invalid
    """
    analyzer_changes = {}
    if args.emission_factor is not None:
        analyzer_changes["emission_factor"] = validate_positive_float(
            args.emission_factor, field_name="--emission-factor"
        )
    if args.timeout is not None:
        analyzer_changes["max_runtime_seconds"] = validate_positive_float(
            args.timeout, exclusive_min=True, field_name="--timeout"
        ) / 1000
    if args.interval is not None:
        analyzer_changes["sampling_interval_seconds"] = validate_positive_float(
            args.interval, exclusive_min=True, field_name="--interval"
        ) / 1000

    output_changes = {}
    if args.output is not None:
        output_changes["default_dir"] = args.output
    if args.format is not None:
        output_changes["format"] = args.format
    if args.no_open:
        output_changes["open_browser"] = False

    return dataclasses.replace(
        app_config,
        analyzer=dataclasses.replace(app_config.analyzer, **analyzer_changes),
        output=dataclasses.replace(app_config.output, **output_changes),
    )


def log_result_summary(result: AnalysisResult) -> None:
    if result.status == OutcomeStatus.SPAWN_FAILED:
        logger.error(f"Could not start {result.script_path}: {result.error}")
        return

    metrics = result.metrics
    if result.status == OutcomeStatus.COMPLETED:
        logger.info(f"{result.script_name} completed with exit code {result.exit_code}")
    elif result.status == OutcomeStatus.TIMED_OUT:
        logger.warning(f"{result.script_name} timed out: {result.error}")
    elif result.status == OutcomeStatus.SIGNALED:
        logger.warning(f"{result.script_name} was killed by {result.signal_name}")

    logger.info(
        f"Duration {format_duration(metrics.execution_time_seconds)}, "
        f"peak CPU {metrics.peak_cpu:.1f}%, peak memory {metrics.peak_memory_mb:.1f} MB, "
        f"{metrics.samples} samples"
    )
    logger.info(
        f"Energy {format_energy(metrics.energy_kwh)}, CO2 {format_co2(metrics.co2_grams)}, "
        f"eco-score {result.eco_score.overall:.0f}/100 ({result.eco_score.grade.letter})"
    )


def write_outputs(result: AnalysisResult, app_config: AppConfig) -> Optional[Path]:
    """
    Save the result files and, for the html format, the dashboard.

    Returns:
        Path of the HTML report, or None when only JSON was written
    """
    output_config = app_config.output
    storage = ResultStorageManager(
        output_config.default_dir, storage=ParquetStorage(compression=output_config.compression)
    )
    written = storage.save_analysis_result(result)
    for kind, path in written.items():
        logger.info(f"Saved {kind} file: {path}")

    if output_config.format != "html":
        return None
    return DashboardGenerator().generate_dashboard(result, output_config.default_dir)


def run_analyze(args: argparse.Namespace) -> int:
    try:
        app_config = apply_overrides(get_config(), args)
        analyzer = EnvironmentalAnalyzer(config=app_config)
        result = analyzer.analyze_sync(args.script)
    except ValidationError as e:
        handle_cli_error(error=e, context="argument validation", exit_code=EXIT_USAGE_ERROR, logger=logger)

    log_result_summary(result)

    report_path = write_outputs(result, app_config)
    if report_path is not None:
        logger.info(f"Report: {report_path.resolve()}")
        if app_config.output.open_browser:
            webbrowser.open(report_path.resolve().as_uri())

    return EXIT_CODES[result.status]


def run_validate(args: argparse.Namespace) -> int:
    try:
        script = validate_script_path(args.script)
    except ValidationError as e:
        handle_cli_error(error=e, context="script validation", exit_code=EXIT_USAGE_ERROR, logger=logger)
    logger.info(f"{script} is a valid analysis target")
    return 0


def run_config(args: argparse.Namespace) -> int:
    app_config = get_config()
    document = {
        "source": get_config_info(),
        "config": dataclasses.asdict(app_config),
    }
    print(json.dumps(document, indent=2, default=str))
    return 0


COMMANDS = {
    "analyze": run_analyze,
    "validate": run_validate,
    "config": run_config,
}


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point of the ``gayacode`` command.

    Raises:
        SystemExit: Always, with the exit code of the command
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.config is not None:
        set_config_path(args.config)

    try:
        exit_code = COMMANDS[args.command](args)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        exit_code = EXIT_INTERRUPTED
    except (OSError, ValueError, ValidationError) as e:
        handle_cli_error(error=e, context=f"'{args.command}' command", exit_code=EXIT_USAGE_ERROR, logger=logger)

    sys.exit(exit_code)
