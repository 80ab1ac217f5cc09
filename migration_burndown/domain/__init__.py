"""
Domain Models - Type-safe data structures for migration burndown

This package contains dataclasses representing business domain concepts:
    - burndown: BurndownPoint, Targets, TrendProjection, EnvironmentProgress, BurndownReport
    - constants: immutable engine constants

Usage:
    from migration_burndown.domain.burndown import BurndownPoint, Targets

    targets = Targets.from_raw({"spa": "2026-06-30", "microservice": "2026-09-30"})
    print(targets.ms)
"""

from .burndown import (
    BurndownPoint,
    BurndownReport,
    EnvironmentProgress,
    MigrationStatus,
    ServiceType,
    Targets,
    TrendDirection,
    TrendProjection,
)
from .constants import burndown_constants, confidence_bands, environment_config

__all__ = [
    "BurndownPoint",
    "BurndownReport",
    "EnvironmentProgress",
    "MigrationStatus",
    "ServiceType",
    "Targets",
    "TrendDirection",
    "TrendProjection",
    "burndown_constants",
    "confidence_bands",
    "environment_config",
]
