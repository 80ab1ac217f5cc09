"""
Burndown Trend Projector - Linear Regression for Migration Backlogs

Simple ML model for:
- Burn rate (net items resolved per day) over a trailing window
- Projected date at which the backlog reaches zero
- Confidence score from fit quality and sample density

Uses scikit-learn LinearRegression on (days since window start, remaining).
"""

from collections.abc import Iterable

import numpy as np
from sklearn.linear_model import LinearRegression

from migration_burndown.core import get_logger
from migration_burndown.domain.burndown import (
    TREND_DECLINING,
    TREND_IMPROVING,
    TREND_STABLE,
    BurndownPoint,
    ServiceType,
    TrendDirection,
    TrendProjection,
)
from migration_burndown.domain.constants import burndown_constants, confidence_bands

logger = get_logger(__name__)

# Slopes smaller than this (items/day) are treated as flat
_FLAT_SLOPE_EPSILON = 1e-9


def extract_observations(points: Iterable[BurndownPoint], service_type: ServiceType) -> list[tuple[int, int]]:
    """
    Extract (timestamp, remaining) pairs where the type's actual value was reported.

    Returns:
        Observations sorted by timestamp ascending
    """
    observations = []
    for point in points:
        remaining = point.actual_for(service_type)
        if remaining is not None:
            observations.append((point.timestamp, remaining))
    observations.sort(key=lambda obs: obs[0])
    return observations


def determine_trend(
    points: Iterable[BurndownPoint],
    service_type: ServiceType,
    lookback: int = burndown_constants.TREND_LOOKBACK_POINTS,
) -> TrendDirection:
    """
    Simplified trend direction from the most recent actual observations.

    Compares the first and last of the last ``lookback`` actual values:
    fewer remaining is improving, more is declining, otherwise stable.

    Returns:
        "improving", "declining" or "stable" (stable when fewer than 2 observations)
    """
    recent = extract_observations(points, service_type)[-lookback:]
    if len(recent) < 2:
        return TREND_STABLE

    first_value = recent[0][1]
    last_value = recent[-1][1]
    if last_value < first_value:
        return TREND_IMPROVING
    if last_value > first_value:
        return TREND_DECLINING
    return TREND_STABLE


def confidence_band(confidence: float) -> str:
    """Map a confidence score to the dashboard's "high" / "medium" / "low" label."""
    if confidence >= confidence_bands.HIGH:
        return "high"
    if confidence >= confidence_bands.MEDIUM:
        return "medium"
    return "low"


class TrendProjector:
    """Project burndown completion using linear regression over a trailing window."""

    def __init__(self, window_days: int = burndown_constants.TREND_WINDOW_DAYS):
        """
        Initialize projector.

        Args:
            window_days: Trailing window, in calendar days before the latest observation (default: 14)
        """
        if window_days <= 0:
            raise ValueError(f"window_days must be positive, got {window_days}")
        self.window_days = window_days
        self.model = LinearRegression()

    def project(self, points: Iterable[BurndownPoint], service_type: ServiceType) -> TrendProjection:
        """
        Compute burn rate, confidence and projected completion for one service type.

        Never raises for sparse or flat data: fewer than 2 observations in the
        window, or a backlog that is not shrinking, yields zero confidence and
        no projected completion.

        Args:
            points: Normalized burndown points for one environment
            service_type: "spa", "ms" or "combined"

        Returns:
            TrendProjection for the service type
        """
        window = self._trailing_window(extract_observations(points, service_type))
        sample_size = len(window)

        if sample_size < burndown_constants.MIN_REGRESSION_POINTS:
            logger.debug(
                "Insufficient observations for projection",
                extra={"service_type": service_type, "sample_size": sample_size},
            )
            return TrendProjection(service_type=service_type, sample_size=sample_size)

        window_start = window[0][0]
        days = np.array([(ts - window_start) / burndown_constants.DAY_MS for ts, _ in window]).reshape(-1, 1)
        remaining = np.array([value for _, value in window], dtype=float)

        if np.ptp(days) == 0:
            logger.debug("Observations share one timestamp", extra={"service_type": service_type})
            return TrendProjection(service_type=service_type, sample_size=sample_size)

        self.model.fit(days, remaining)
        slope = float(self.model.coef_[0])
        intercept = float(self.model.intercept_)
        r_squared = float(np.clip(self.model.score(days, remaining), 0.0, 1.0))

        burn_rate = 0.0 if abs(slope) < _FLAT_SLOPE_EPSILON else -slope

        logger.debug(
            "Model trained",
            extra={
                "service_type": service_type,
                "slope": slope,
                "r2_score": r_squared,
                "samples": sample_size,
            },
        )

        if burn_rate <= 0:
            return TrendProjection(
                service_type=service_type,
                burn_rate=round(burn_rate, 4),
                confidence=0.0,
                sample_size=sample_size,
                r_squared=round(r_squared, 4),
            )

        last_day = float(days[-1, 0])
        fitted_last = intercept + slope * last_day
        days_to_zero = max(0.0, fitted_last / burn_rate)
        projected_completion = int(round(window[-1][0] + days_to_zero * burndown_constants.DAY_MS))

        return TrendProjection(
            service_type=service_type,
            burn_rate=round(burn_rate, 4),
            confidence=round(self._confidence(r_squared, sample_size), 4),
            projected_completion=projected_completion,
            sample_size=sample_size,
            r_squared=round(r_squared, 4),
        )

    def _trailing_window(self, observations: list[tuple[int, int]]) -> list[tuple[int, int]]:
        """Keep observations within ``window_days`` of the latest one (inclusive)."""
        if not observations:
            return []
        cutoff = observations[-1][0] - self.window_days * burndown_constants.DAY_MS
        return [obs for obs in observations if obs[0] >= cutoff]

    @staticmethod
    def _confidence(r_squared: float, sample_size: int) -> float:
        """
        Confidence = fit quality x sample density.

        Sparse windows (fewer than HIGH_CONFIDENCE_MIN_POINTS) are capped at
        the low band regardless of how well two or three points fit a line.
        """
        density = min(1.0, sample_size / burndown_constants.FULL_DENSITY_POINTS)
        confidence = max(0.0, min(1.0, r_squared)) * density
        if sample_size < burndown_constants.HIGH_CONFIDENCE_MIN_POINTS:
            confidence = min(confidence, burndown_constants.LOW_CONFIDENCE_CAP)
        return confidence
