#!/usr/bin/env python3
"""
Generate the Migration Burndown report from a raw burndown JSON document

Orchestrates the pipeline:
1. Load Data - read the raw per-environment series document
2. Calculate - normalize, project, classify and aggregate per environment
3. Save Output - write the dashboard JSON atomically, or print it

Usage:
    burndown-report data/burndown.json --now 2026-05-01 --output .tmp/burndown/report.json
"""

import argparse
import json
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from migration_burndown.config import ConfigurationError, get_config
from migration_burndown.core import get_logger, setup_logging
from migration_burndown.dashboards.burndown import BurndownCalculator, build_burndown_report, report_to_dict
from migration_burndown.exceptions import BurndownDataError
from migration_burndown.ml import TrendProjector, confidence_band
from migration_burndown.utils.atomic_json import atomic_json_save, load_json_document
from migration_burndown.utils.datetime_utils import parse_iso_timestamp
from migration_burndown.utils.error_handling import log_and_raise

logger = get_logger(__name__)


def _parse_now(value: str) -> datetime:
    """argparse type for --now."""
    try:
        parsed = parse_iso_timestamp(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    if parsed is None:
        raise argparse.ArgumentTypeError("--now must not be empty")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate migration burndown analytics from raw series data")
    parser.add_argument("input", type=Path, help="Raw burndown JSON document")
    parser.add_argument(
        "--now",
        type=_parse_now,
        default=None,
        help="Evaluation time (ISO date or timestamp, default: current UTC time)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write report JSON here instead of stdout")
    parser.add_argument("--log-level", default=None, help="Override BURNDOWN_LOG_LEVEL")
    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON logs")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main report generation pipeline"""
    args = build_parser().parse_args(argv)

    try:
        settings = get_config().get_burndown_settings()
    except ConfigurationError as e:
        setup_logging(level="INFO")
        logger.error(f"Invalid configuration: {e}")
        return 2

    setup_logging(level=args.log_level or settings.log_level, json_output=args.json_logs or settings.log_json)

    # The CLI is the only place the wall clock is read; the engine always receives now explicitly
    now = args.now or datetime.now(UTC)

    logger.info("Migration Burndown report", extra={"input": str(args.input), "now": now.isoformat()})

    # Stage 1: Load Data
    try:
        raw = load_json_document(args.input)
    except BurndownDataError as e:
        logger.error(str(e))
        return 1

    # Stage 2: Calculate
    calculator = BurndownCalculator(
        projector=TrendProjector(window_days=settings.trend_window_days),
        environment_order=settings.environment_order,
    )
    report = build_burndown_report(raw, now=now, calculator=calculator)

    if report.is_empty:
        logger.warning("No burndown data found")

    for progress in report.environments:
        logger.info(
            f"{progress.env}: {progress.status} ({progress.overall_progress}% migrated, "
            f"confidence {confidence_band(progress.confidence)})"
        )

    # Stage 3: Save Output
    payload = report_to_dict(report)
    if args.output:
        try:
            atomic_json_save(payload, args.output)
        except (OSError, TypeError) as e:
            log_and_raise(logger, e, context={"output": str(args.output)}, error_type="Report save")
    else:
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
