"""
Pytest configuration and shared fixtures

Provides common fixtures for burndown points, raw documents and the
evaluation clock.
"""

from datetime import UTC, datetime

import pytest

from migration_burndown.domain.burndown import BurndownPoint
from migration_burndown.utils.datetime_utils import date_to_epoch_ms

# ===== Clock Fixtures =====


@pytest.fixture
def sample_now():
    """Provide a consistent evaluation time for testing"""
    return datetime(2024, 5, 1, tzinfo=UTC)


# ===== Domain Model Fixtures =====


@pytest.fixture
def make_point():
    """Factory for BurndownPoint on an ISO date"""

    def _make(day: str, **values) -> BurndownPoint:
        return BurndownPoint(date=day, timestamp=date_to_epoch_ms(day), **values)

    return _make


# ===== Raw Document Fixtures =====


@pytest.fixture
def sample_raw_document():
    """
    Raw burndown document covering each status path.

    Environments are deliberately listed out of canonical order:
    - dev: both types burning down ahead of future targets (on_track)
    - sit: everything migrated after the shared target passed (completed_late)
    - uat: flat SPA backlog with an unparseable target (at_risk, no days to target)
    - perf: planned series only, non-canonical name (at_risk)
    """
    return {
        "environments": [
            {
                "env": "perf",
                "target": "2024-05-10",
                "series": [
                    {
                        "key": "spa.planned",
                        "points": [{"x": "2024-04-20", "y": 25, "total": 25}, {"x": "2024-05-10", "y": 0}],
                    }
                ],
            },
            {
                "env": "uat",
                "target": "not-a-date",
                "series": [
                    {
                        "key": "spa.actual",
                        "points": [
                            {"x": "2024-04-25", "y": 10, "total": 10},
                            {"x": "2024-04-28", "y": 10},
                            {"x": "2024-04-30", "y": 10},
                        ],
                    }
                ],
            },
            {
                "env": "sit",
                "target": "2024-04-15",
                "series": [
                    {
                        "key": "spa.actual",
                        "points": [
                            {"x": "2024-04-01", "y": 5, "total": 5},
                            {"x": "2024-04-10", "y": 2},
                            {"x": "2024-04-20", "y": 0},
                        ],
                    },
                    {
                        "key": "microservice.actual",
                        "points": [{"x": "2024-04-01", "y": 3, "total": 3}, {"x": "2024-04-20", "y": 0}],
                    },
                ],
            },
            {
                "env": "dev",
                "target": {"spa": "2024-06-01", "microservice": "2024-07-01"},
                "scope": {"spa": {"inEnv": 100}, "microservice": {"inEnv": 40}},
                "series": [
                    {
                        "key": "spa.actual",
                        "points": [
                            {"x": "2024-04-20", "y": 60},
                            {"x": "2024-04-24", "y": 52},
                            {"x": "2024-04-27", "y": 45},
                            {"x": "2024-04-30", "y": 40},
                        ],
                    },
                    {
                        "key": "ms.actual",
                        "points": [
                            {"x": "2024-04-20", "y": 30},
                            {"x": "2024-04-24", "y": 29},
                            {"x": "2024-04-27", "y": 28},
                            {"x": "2024-04-30", "y": 27},
                        ],
                    },
                    {
                        "key": "spa.planned",
                        "points": [{"x": "2024-04-20", "y": 60}, {"x": "2024-06-01", "y": 0}],
                    },
                ],
            },
        ]
    }
