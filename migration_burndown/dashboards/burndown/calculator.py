"""Burndown calculation logic for the Migration Burndown Dashboard

Aggregates normalized burndown points into per-environment progress records:
- Current remaining counts and progress percentages
- Regression projections per service type and combined
- Per-type and combined status classification
- Days to target and chart axis bounds
- Projection line points for the chart layer
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any

from migration_burndown.core import get_logger, log_with_context
from migration_burndown.dashboards.burndown.normalizer import normalize_burndown_data
from migration_burndown.dashboards.burndown.status import classify_status, combine_statuses
from migration_burndown.domain.burndown import (
    BurndownPoint,
    BurndownReport,
    EnvironmentProgress,
    ServiceType,
    Targets,
)
from migration_burndown.domain.constants import burndown_constants, environment_config
from migration_burndown.ml.trend_projector import TrendProjector, determine_trend
from migration_burndown.utils.datetime_utils import date_to_epoch_ms, datetime_to_epoch_ms, epoch_ms_to_date

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def calculate_progress(total: int, current: int) -> int:
    """
    Percent of scope migrated.

    Returns:
        round(100 * (total - current) / total), or 0 when total is 0
    """
    if total <= 0:
        return 0
    return round_half_up(100 * (total - current) / total)


def calculate_days_to_target(target_timestamps: Iterable[int], now_ts: int) -> int | None:
    """
    Whole days until the nearest target, floored at zero.

    Returns:
        ceil((min(targets) - now) / day) clamped to >= 0, or None without any valid target
    """
    valid = list(target_timestamps)
    if not valid:
        return None
    return max(0, math.ceil((min(valid) - now_ts) / burndown_constants.DAY_MS))


def order_environments(env_names: Iterable[str], order: Sequence[str] = environment_config.ORDER) -> list[str]:
    """Canonical environments first (in ``order``), then the rest in encounter order."""
    names = list(dict.fromkeys(env_names))
    known = [env for env in order if env in names]
    return known + [env for env in names if env not in order]


def latest_actual(points: Sequence[BurndownPoint], service_type: ServiceType) -> int | None:
    """Most recently reported actual remaining count for a service type."""
    for point in reversed(points):
        value = point.actual_for(service_type)
        if value is not None:
            return value
    return None


def has_series_data(points: Sequence[BurndownPoint], service_type: ServiceType) -> bool:
    """True when any point carries an actual or planned value for the service type."""
    return any(
        point.actual_for(service_type) is not None or point.planned_for(service_type) is not None
        for point in points
    )


def build_projection_points(
    points: Sequence[BurndownPoint],
    projected_completion: int | None,
    steps: int = burndown_constants.PROJECTION_STEPS,
    as_of: int | None = None,
) -> list[BurndownPoint]:
    """
    Add a dotted projection line from the last actual point down to zero.

    The last point with actual data gets its current values as projected
    values, up to ``steps`` whole-day points are interpolated linearly, and a
    terminal zero point sits on the projected completion date. Existing points
    on those dates are updated rather than duplicated. With ``as_of`` the line
    starts from the last actual point dated at or before it.

    Returns:
        New, date-ordered list; ``points`` is not modified
    """
    result = {point.date: replace(point) for point in points}
    anchor = next(
        (
            point
            for point in reversed(points)
            if point.has_actual and (as_of is None or point.timestamp <= as_of)
        ),
        None,
    )
    if projected_completion is None or anchor is None:
        return sorted(result.values(), key=lambda p: p.timestamp)

    last_spa = anchor.spa_actual or 0
    last_ms = anchor.ms_actual or 0
    last_combined = last_spa + last_ms
    result[anchor.date] = replace(
        result[anchor.date],
        spa_projected=last_spa,
        ms_projected=last_ms,
        combined_projected=last_combined,
    )

    end_date = epoch_ms_to_date(projected_completion)
    end_ts = date_to_epoch_ms(end_date)
    span_days = (end_ts - anchor.timestamp) // burndown_constants.DAY_MS
    if span_days <= 0:
        return sorted(result.values(), key=lambda p: p.timestamp)

    def _set_projected(day_offset: int, fraction_left: float) -> None:
        timestamp = anchor.timestamp + day_offset * burndown_constants.DAY_MS
        day = epoch_ms_to_date(timestamp)
        base = result.get(day) or BurndownPoint(
            date=day,
            timestamp=timestamp,
            spa_total=anchor.spa_total,
            ms_total=anchor.ms_total,
        )
        result[day] = replace(
            base,
            spa_projected=max(0, round_half_up(last_spa * fraction_left)),
            ms_projected=max(0, round_half_up(last_ms * fraction_left)),
            combined_projected=max(0, round_half_up(last_combined * fraction_left)),
        )

    intermediate = max(0, min(steps, span_days - 1))
    for i in range(1, intermediate + 1):
        offset = round_half_up(span_days * i / (intermediate + 1))
        _set_projected(offset, 1 - offset / span_days)
    _set_projected(span_days, 0.0)

    return sorted(result.values(), key=lambda p: p.timestamp)


class BurndownCalculator:
    """Calculate per-environment progress for the Migration Burndown Dashboard"""

    def __init__(
        self,
        projector: TrendProjector | None = None,
        environment_order: Sequence[str] = environment_config.ORDER,
    ):
        """Initialize calculator

        Args:
            projector: Trend projector (default: 14-day window TrendProjector)
            environment_order: Canonical environment order for the output
        """
        self.projector = projector or TrendProjector()
        self.environment_order = tuple(environment_order)

    def calculate_environment_metrics(
        self,
        points_by_env: Mapping[str, Sequence[BurndownPoint]],
        targets_by_env: Mapping[str, Targets],
        now: datetime,
    ) -> list[EnvironmentProgress]:
        """Build progress records for every environment with data

        Args:
            points_by_env: Normalized points per environment
            targets_by_env: Targets per environment
            now: Evaluation time (naive values are treated as UTC)

        Returns:
            EnvironmentProgress list in canonical environment order.
            Environments without points are omitted.
        """
        now_ts = datetime_to_epoch_ms(now)
        metrics: list[EnvironmentProgress] = []

        for env in order_environments(points_by_env.keys(), self.environment_order):
            points = points_by_env[env]
            if not points:
                logger.debug("Skipping environment without points", extra={"env": env})
                continue
            metrics.append(self.calculate_environment(env, points, targets_by_env.get(env, Targets()), now_ts))

        logger.info("Calculated environment metrics", extra={"environment_count": len(metrics)})
        return metrics

    def calculate_environment(
        self,
        env: str,
        points: Sequence[BurndownPoint],
        targets: Targets,
        now_ts: int,
    ) -> EnvironmentProgress:
        """Build the progress record for one environment

        Args:
            env: Environment name
            points: Normalized, non-empty, timestamp-ordered points
            targets: SPA/MS targets for the environment
            now_ts: Evaluation time as epoch milliseconds

        Only points dated at or before ``now_ts`` count as observations for
        current counts, trends and projections.
        """
        latest = points[-1]
        total_spa = latest.spa_total or 0
        total_ms = latest.ms_total or 0

        # Status is evaluated as of now; later-dated points only feed the chart
        observed = [point for point in points if point.timestamp <= now_ts]

        observed_spa = latest_actual(observed, "spa")
        observed_ms = latest_actual(observed, "ms")
        current_spa = observed_spa if observed_spa is not None else total_spa
        current_ms = observed_ms if observed_ms is not None else total_ms
        # A type with data but nothing observed yet has not started, so it cannot be completed
        spa_reported = observed_spa is not None or not has_series_data(points, "spa")
        ms_reported = observed_ms is not None or not has_series_data(points, "ms")

        spa_target_ts = targets.timestamp_for("spa")
        ms_target_ts = targets.timestamp_for("ms")
        valid_targets = [ts for ts in (spa_target_ts, ms_target_ts) if ts is not None]

        spa_projection = self.projector.project(observed, "spa")
        ms_projection = self.projector.project(observed, "ms")
        combined_projection = self.projector.project(observed, "combined")

        spa_trend = determine_trend(observed, "spa")
        ms_trend = determine_trend(observed, "ms")

        spa_status = classify_status(current_spa, spa_target_ts, spa_trend, now_ts, reported=spa_reported)
        ms_status = classify_status(current_ms, ms_target_ts, ms_trend, now_ts, reported=ms_reported)
        status = combine_statuses(spa_status, ms_status)

        axis_candidates = [latest.timestamp, *valid_targets]
        if combined_projection.projected_completion is not None:
            axis_candidates.append(combined_projection.projected_completion)

        progress = EnvironmentProgress(
            env=env,
            target_spa=targets.spa,
            target_ms=targets.ms,
            current_spa=current_spa,
            current_ms=current_ms,
            total_spa=total_spa,
            total_ms=total_ms,
            spa_progress=calculate_progress(total_spa, current_spa),
            ms_progress=calculate_progress(total_ms, current_ms),
            overall_progress=calculate_progress(total_spa + total_ms, current_spa + current_ms),
            days_to_target=calculate_days_to_target(valid_targets, now_ts),
            spa_status=spa_status,
            ms_status=ms_status,
            status=status,
            spa_trend=spa_trend,
            ms_trend=ms_trend,
            burn_rate=combined_projection.burn_rate,
            confidence=combined_projection.confidence,
            projected_completion=combined_projection.projected_completion,
            spa_projection=spa_projection,
            ms_projection=ms_projection,
            axis_end=max(axis_candidates),
        )

        log_with_context(
            logger,
            "debug",
            "Environment classified",
            env=env,
            status=status,
            spa_status=spa_status,
            ms_status=ms_status,
            overall_progress=progress.overall_progress,
            days_to_target=progress.days_to_target,
        )
        return progress


def aggregate(
    points_by_env: Mapping[str, Sequence[BurndownPoint]],
    targets_by_env: Mapping[str, Targets],
    now: datetime,
) -> list[EnvironmentProgress]:
    """Convenience wrapper: default BurndownCalculator over normalized data."""
    return BurndownCalculator().calculate_environment_metrics(points_by_env, targets_by_env, now)


def build_burndown_report(
    raw: Mapping[str, Any] | None,
    now: datetime,
    calculator: BurndownCalculator | None = None,
) -> BurndownReport:
    """
    Run the full pipeline: normalize -> project -> classify -> aggregate.

    Args:
        raw: Raw burndown document
        now: Evaluation time
        calculator: Optional pre-configured calculator

    Returns:
        BurndownReport with ordered environments and chart points (projection lines included)
    """
    calculator = calculator or BurndownCalculator()
    now_ts = datetime_to_epoch_ms(now)
    points_by_env, targets_by_env = normalize_burndown_data(raw)
    environments = calculator.calculate_environment_metrics(points_by_env, targets_by_env, now)

    projections = {progress.env: progress.projected_completion for progress in environments}
    chart_points = {
        env: build_projection_points(points_by_env[env], projections.get(env), as_of=now_ts)
        for env in order_environments(points_by_env.keys(), calculator.environment_order)
    }

    return BurndownReport(environments=environments, points=chart_points, generated_at=now_ts)


def report_to_dict(report: BurndownReport) -> dict[str, Any]:
    """Convert a BurndownReport to a JSON-serializable dict for the dashboard."""
    return {
        "generatedAt": report.generated_at,
        "environments": [progress.to_dict() for progress in report.environments],
        "points": {env: [point.to_dict() for point in points] for env, points in report.points.items()},
    }
