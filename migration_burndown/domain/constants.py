#!/usr/bin/env python3
"""
Application Constants

Centralized, immutable constants for burndown normalization, trend
projection and status classification.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BurndownConstants:
    """
    Burndown analytics constants.

    Attributes:
        DAY_MS: Milliseconds per calendar day
        TREND_WINDOW_DAYS: Trailing window (days before the latest observation) used for regression
        MIN_REGRESSION_POINTS: Observations required before any projection is produced
        HIGH_CONFIDENCE_MIN_POINTS: Observations required before confidence may leave the low band
        LOW_CONFIDENCE_CAP: Highest confidence allowed for sparse windows
        FULL_DENSITY_POINTS: Observations in the window at which sample density stops discounting confidence
        TREND_LOOKBACK_POINTS: Actual observations compared by the simplified trend signal
        PROJECTION_STEPS: Maximum intermediate chart points between last actual and projected completion

    Example:
        >>> constants = burndown_constants
        >>> print(constants.TREND_WINDOW_DAYS)
        14
    """

    DAY_MS: int = 24 * 60 * 60 * 1000
    """Milliseconds per calendar day"""

    TREND_WINDOW_DAYS: int = 14
    """Trailing regression window, in calendar days"""

    MIN_REGRESSION_POINTS: int = 2
    """Minimum observations in the window for a regression fit"""

    HIGH_CONFIDENCE_MIN_POINTS: int = 4
    """Fewer observations than this cap confidence at LOW_CONFIDENCE_CAP"""

    LOW_CONFIDENCE_CAP: float = 0.4
    """Upper bound of confidence for sparse windows (inside the low band)"""

    FULL_DENSITY_POINTS: int = 7
    """Observations in the window for full sample density (one every other day)"""

    TREND_LOOKBACK_POINTS: int = 3
    """Most recent actual observations compared for improving/declining/stable"""

    PROJECTION_STEPS: int = 8
    """Maximum interpolated points drawn on the projection line"""


@dataclass(frozen=True)
class ConfidenceBands:
    """
    Confidence band thresholds used by the dashboard copy.

    Attributes:
        HIGH: Confidence at or above this is "high" (0.8)
        MEDIUM: Confidence at or above this is "medium" (0.5)
    """

    HIGH: float = 0.8
    """Lower bound of the high band"""

    MEDIUM: float = 0.5
    """Lower bound of the medium band"""


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Environment presentation constants.

    Attributes:
        ORDER: Canonical environment order; unknown environments follow in encounter order
    """

    ORDER: tuple[str, ...] = field(default=("dev", "sit", "uat", "nft"))
    """Canonical environment order relied on by the dashboard"""


# Singleton instances for easy import
burndown_constants = BurndownConstants()
confidence_bands = ConfidenceBands()
environment_config = EnvironmentConfig()
