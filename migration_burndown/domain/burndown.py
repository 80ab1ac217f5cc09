"""
Burndown domain models - Points, targets, projections and progress records

Represents migration burndown data for tracking:
    - Items remaining per environment and service type over time
    - SPA / Microservice target dates
    - Regression-based projections
    - Per-environment progress and status
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from migration_burndown.core import get_logger
from migration_burndown.utils.datetime_utils import date_to_epoch_ms, epoch_ms_to_date
from migration_burndown.utils.error_handling import log_and_return_default

logger = get_logger(__name__)

ServiceType = Literal["spa", "ms", "combined"]
TrendDirection = Literal["improving", "declining", "stable"]
MigrationStatus = Literal["completed", "completed_late", "on_track", "at_risk", "missed"]

SERVICE_TYPES: tuple[ServiceType, ...] = ("spa", "ms")

STATUS_COMPLETED: MigrationStatus = "completed"
STATUS_COMPLETED_LATE: MigrationStatus = "completed_late"
STATUS_ON_TRACK: MigrationStatus = "on_track"
STATUS_AT_RISK: MigrationStatus = "at_risk"
STATUS_MISSED: MigrationStatus = "missed"

TREND_IMPROVING: TrendDirection = "improving"
TREND_DECLINING: TrendDirection = "declining"
TREND_STABLE: TrendDirection = "stable"


@dataclass
class BurndownPoint:
    """
    One calendar date of burndown data for one environment.

    Attributes:
        date: ISO 8601 calendar date (YYYY-MM-DD)
        timestamp: Epoch milliseconds of ``date`` at midnight UTC
        spa_actual: SPAs still to migrate, as reported
        spa_planned: SPAs planned to remain on this date
        ms_actual: Microservices still to migrate, as reported
        ms_planned: Microservices planned to remain on this date
        spa_total: SPAs in scope (backfilled when not reported)
        ms_total: Microservices in scope (backfilled when not reported)
        spa_projected / ms_projected / combined_projected: Chart-only projection line values

    Example:
        point = BurndownPoint(date="2026-03-02", timestamp=1772409600000, spa_actual=40, ms_actual=12)
        print(point.combined_actual)  # 52
    """

    date: str
    timestamp: int
    spa_actual: int | None = None
    spa_planned: int | None = None
    ms_actual: int | None = None
    ms_planned: int | None = None
    spa_total: int | None = None
    ms_total: int | None = None
    spa_projected: int | None = None
    ms_projected: int | None = None
    combined_projected: int | None = None

    @property
    def combined_actual(self) -> int:
        """SPA + Microservice actual remaining (missing values count as zero)."""
        return (self.spa_actual or 0) + (self.ms_actual or 0)

    @property
    def combined_planned(self) -> int:
        """SPA + Microservice planned remaining (missing values count as zero)."""
        return (self.spa_planned or 0) + (self.ms_planned or 0)

    @property
    def has_actual(self) -> bool:
        return self.spa_actual is not None or self.ms_actual is not None

    def actual_for(self, service_type: ServiceType) -> int | None:
        """
        Get the actual remaining count for a service type.

        Returns:
            The reported count, or None when nothing was reported for that type.
            For "combined", None only when neither type reported.
        """
        if service_type == "spa":
            return self.spa_actual
        if service_type == "ms":
            return self.ms_actual
        return self.combined_actual if self.has_actual else None

    def planned_for(self, service_type: ServiceType) -> int | None:
        if service_type == "spa":
            return self.spa_planned
        if service_type == "ms":
            return self.ms_planned
        if self.spa_planned is None and self.ms_planned is None:
            return None
        return self.combined_planned

    def total_for(self, service_type: ServiceType) -> int | None:
        if service_type == "spa":
            return self.spa_total
        if service_type == "ms":
            return self.ms_total
        if self.spa_total is None and self.ms_total is None:
            return None
        return (self.spa_total or 0) + (self.ms_total or 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dict for the chart layer, omitting absent values."""
        data: dict[str, Any] = {
            "date": self.date,
            "timestamp": self.timestamp,
            "spaActual": self.spa_actual,
            "spaPlanned": self.spa_planned,
            "msActual": self.ms_actual,
            "msPlanned": self.ms_planned,
            "spaTotal": self.spa_total,
            "msTotal": self.ms_total,
            "combinedActual": self.combined_actual if self.has_actual else None,
            "combinedPlanned": self.combined_planned,
            "spaProjected": self.spa_projected,
            "msProjected": self.ms_projected,
            "combinedProjected": self.combined_projected,
        }
        return {key: value for key, value in data.items() if value is not None}


def parse_target_timestamp(value: str | None, context: dict[str, Any] | None = None) -> int | None:
    """
    Parse a target date to epoch milliseconds.

    Missing targets return None silently; unparseable ones are logged and
    also return None, which the classifier treats as "infinitely far away".
    """
    if value is None or value == "":
        return None
    try:
        return date_to_epoch_ms(value)
    except ValueError as e:
        return log_and_return_default(
            logger,
            e,
            context={"target": value, **(context or {})},
            default_value=None,
            error_type="Target date parsing",
        )


@dataclass(frozen=True)
class Targets:
    """
    SPA and Microservice target dates for one environment.

    Attributes:
        spa: ISO date by which SPAs should reach zero remaining, or None
        ms: ISO date by which Microservices should reach zero remaining, or None
    """

    spa: str | None = None
    ms: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Targets":
        """
        Build Targets from either input shape.

        - "2026-06-30" applies the same date to both tracks
        - {"spa": "...", "microservice": "..."} sets them independently ("ms" also accepted)
        - anything else yields no targets
        """
        if isinstance(raw, str):
            value = raw.strip() or None
            return cls(spa=value, ms=value)
        if isinstance(raw, Mapping):
            spa = raw.get("spa")
            ms = raw.get("microservice", raw.get("ms"))
            return cls(
                spa=str(spa) if spa else None,
                ms=str(ms) if ms else None,
            )
        return cls()

    def for_type(self, service_type: ServiceType) -> str | None:
        if service_type == "spa":
            return self.spa
        if service_type == "ms":
            return self.ms
        return None

    def timestamp_for(self, service_type: ServiceType) -> int | None:
        """Target for a service type as epoch milliseconds, or None if missing/unparseable."""
        return parse_target_timestamp(self.for_type(service_type), context={"service_type": service_type})


@dataclass(frozen=True)
class TrendProjection:
    """
    Regression-based burndown projection for one service type.

    Attributes:
        service_type: "spa", "ms" or "combined"
        burn_rate: Net items resolved per day (positive = shrinking backlog); None without a fit
        confidence: Trust in the projected completion, 0.0-1.0
        projected_completion: Epoch milliseconds when the fitted line reaches zero, or None
        sample_size: Observations inside the trailing window
        r_squared: Coefficient of determination of the fit, or None without a fit
    """

    service_type: ServiceType
    burn_rate: float | None = None
    confidence: float = 0.0
    projected_completion: int | None = None
    sample_size: int = 0
    r_squared: float | None = None

    @property
    def projected_completion_date(self) -> str | None:
        if self.projected_completion is None:
            return None
        return epoch_ms_to_date(self.projected_completion)

    def to_dict(self) -> dict[str, Any]:
        return {
            "serviceType": self.service_type,
            "burnRate": self.burn_rate,
            "confidence": self.confidence,
            "projectedCompletion": self.projected_completion,
            "projectedCompletionDate": self.projected_completion_date,
            "sampleSize": self.sample_size,
            "rSquared": self.r_squared,
        }


@dataclass
class EnvironmentProgress:
    """
    Migration progress for one environment, derived from its burndown points.

    Attributes:
        env: Environment name (dev, sit, uat, nft, ...)
        target_spa / target_ms: Target dates as given in the input
        current_spa / current_ms: Most recent remaining counts (total if never reported)
        total_spa / total_ms: Services in scope
        spa_progress / ms_progress / overall_progress: Integer percent migrated
        days_to_target: Days until the nearer valid target (floored at 0), None without targets
        spa_status / ms_status / status: Per-type and combined status
        spa_trend / ms_trend: Simplified trend direction per type
        burn_rate / confidence / projected_completion: Combined-series projection outputs
        spa_projection / ms_projection: Per-type projections
        axis_end: Chart x-axis end (epoch ms)
    """

    env: str
    target_spa: str | None
    target_ms: str | None
    current_spa: int
    current_ms: int
    total_spa: int
    total_ms: int
    spa_progress: int
    ms_progress: int
    overall_progress: int
    days_to_target: int | None
    spa_status: MigrationStatus
    ms_status: MigrationStatus
    status: MigrationStatus
    spa_trend: TrendDirection = TREND_STABLE
    ms_trend: TrendDirection = TREND_STABLE
    burn_rate: float | None = None
    confidence: float = 0.0
    projected_completion: int | None = None
    spa_projection: TrendProjection | None = None
    ms_projection: TrendProjection | None = None
    axis_end: int | None = None

    @property
    def is_on_track(self) -> bool:
        """True when the environment is on track or already complete."""
        return self.status in (STATUS_ON_TRACK, STATUS_COMPLETED, STATUS_COMPLETED_LATE)

    @property
    def is_complete(self) -> bool:
        return self.status in (STATUS_COMPLETED, STATUS_COMPLETED_LATE)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dict for the presentation layer."""
        return {
            "env": self.env,
            "targetSpa": self.target_spa,
            "targetMs": self.target_ms,
            "currentSpa": self.current_spa,
            "currentMs": self.current_ms,
            "totalSpa": self.total_spa,
            "totalMs": self.total_ms,
            "spaProgress": self.spa_progress,
            "msProgress": self.ms_progress,
            "overallProgress": self.overall_progress,
            "daysToTarget": self.days_to_target,
            "spaStatus": self.spa_status,
            "msStatus": self.ms_status,
            "status": self.status,
            "isOnTrack": self.is_on_track,
            "spaTrend": self.spa_trend,
            "msTrend": self.ms_trend,
            "burnRate": self.burn_rate,
            "confidence": self.confidence,
            "projectedCompletion": self.projected_completion,
            "projectedCompletionDate": (
                epoch_ms_to_date(self.projected_completion) if self.projected_completion is not None else None
            ),
            "spaProjection": self.spa_projection.to_dict() if self.spa_projection else None,
            "msProjection": self.ms_projection.to_dict() if self.ms_projection else None,
            "axisEnd": self.axis_end,
        }


@dataclass
class BurndownReport:
    """
    Complete engine output for one refresh.

    Attributes:
        environments: Progress records in canonical environment order
        points: Normalized points per environment, including projection line points
        generated_at: Epoch milliseconds of the ``now`` the report was computed for
    """

    environments: list[EnvironmentProgress]
    points: dict[str, list[BurndownPoint]] = field(default_factory=dict)
    generated_at: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.environments
