"""
Migration Burndown Dashboard data layer

Pipeline:
1. Normalize - normalize_burndown_data() merges raw series into dated points
2. Calculate - BurndownCalculator projects, classifies and aggregates per environment
3. Serialize - report_to_dict() produces the dashboard JSON

Usage:
    from datetime import datetime, UTC
    from migration_burndown.dashboards.burndown import build_burndown_report, report_to_dict

    report = build_burndown_report(raw_document, now=datetime.now(UTC))
    payload = report_to_dict(report)
"""

from .calculator import (
    BurndownCalculator,
    aggregate,
    build_burndown_report,
    build_projection_points,
    calculate_days_to_target,
    calculate_progress,
    order_environments,
    report_to_dict,
)
from .normalizer import backfill_totals, normalize_burndown_data, normalize_environment
from .status import classify_status, combine_statuses

__all__ = [
    "BurndownCalculator",
    "aggregate",
    "backfill_totals",
    "build_burndown_report",
    "build_projection_points",
    "calculate_days_to_target",
    "calculate_progress",
    "classify_status",
    "combine_statuses",
    "normalize_burndown_data",
    "normalize_environment",
    "order_environments",
    "report_to_dict",
]
