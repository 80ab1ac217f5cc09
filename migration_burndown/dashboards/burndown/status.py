"""
Status classification for the Burndown Dashboard

Per service type:
    1. nothing remaining     -> completed (on/before target, or no target) / completed_late;
                                skipped for a type with series data but no actual observed yet
    2. target passed         -> missed
    3. otherwise             -> on_track when improving, else at_risk

Per environment, combined from the SPA and Microservice statuses with the
precedence completed-family > missed > both on_track > at_risk.
"""

from migration_burndown.domain.burndown import (
    STATUS_AT_RISK,
    STATUS_COMPLETED,
    STATUS_COMPLETED_LATE,
    STATUS_MISSED,
    STATUS_ON_TRACK,
    TREND_IMPROVING,
    MigrationStatus,
)

_COMPLETED_STATUSES = frozenset({STATUS_COMPLETED, STATUS_COMPLETED_LATE})


def classify_status(
    remaining: int,
    target_ts: int | None,
    trend: str,
    now_ts: int,
    reported: bool = True,
) -> MigrationStatus:
    """
    Classify one service type's migration status.

    Args:
        remaining: Items still to migrate
        target_ts: Target date as epoch milliseconds, or None (treated as infinitely far)
        trend: Simplified trend direction ("improving", "declining", "stable")
        now_ts: Evaluation time as epoch milliseconds
        reported: False when the type has series data but no actual observed
            yet; such a type is never completed, whatever ``remaining`` says

    Returns:
        One of completed, completed_late, missed, on_track, at_risk

    Example:
        >>> classify_status(0, target_ts=1000, trend="stable", now_ts=1000)
        'completed'
        >>> classify_status(0, target_ts=1000, trend="stable", now_ts=1001)
        'completed_late'
    """
    if remaining <= 0 and reported:
        if target_ts is None or now_ts <= target_ts:
            return STATUS_COMPLETED
        return STATUS_COMPLETED_LATE

    if target_ts is not None and now_ts > target_ts:
        return STATUS_MISSED

    return STATUS_ON_TRACK if trend == TREND_IMPROVING else STATUS_AT_RISK


def combine_statuses(spa_status: str, ms_status: str) -> MigrationStatus:
    """
    Combine SPA and Microservice statuses into one environment status.

    Example:
        >>> combine_statuses("missed", "on_track")
        'missed'
        >>> combine_statuses("completed_late", "completed")
        'completed_late'
    """
    if spa_status in _COMPLETED_STATUSES and ms_status in _COMPLETED_STATUSES:
        if STATUS_COMPLETED_LATE in (spa_status, ms_status):
            return STATUS_COMPLETED_LATE
        return STATUS_COMPLETED

    if STATUS_MISSED in (spa_status, ms_status):
        return STATUS_MISSED

    if spa_status == STATUS_ON_TRACK and ms_status == STATUS_ON_TRACK:
        return STATUS_ON_TRACK

    return STATUS_AT_RISK
