"""
Normalization module for the Burndown Dashboard

Turns the raw burndown document (per environment: target, optional scope and
named point series) into one merged, date-ordered list of BurndownPoint per
environment plus a Targets record per environment.

Raw document shape:
    {
        "environments": [
            {
                "env": "dev",
                "target": "2026-06-30" | {"spa": "2026-06-30", "microservice": "2026-09-30"},
                "scope": {"spa": {"inEnv": 160}, "microservice": {"inEnv": 42}},
                "series": [
                    {"key": "spa.actual", "points": [{"x": "2026-01-05", "y": 150, "total": 160}]},
                    {"key": "ms.planned", "points": [{"x": "2026-01-05", "y": 40}]}
                ]
            }
        ]
    }
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from migration_burndown.core import get_logger
from migration_burndown.domain.burndown import SERVICE_TYPES, BurndownPoint, ServiceType, Targets
from migration_burndown.utils.datetime_utils import date_to_epoch_ms, epoch_ms_to_date
from migration_burndown.utils.error_handling import log_and_continue

logger = get_logger(__name__)

_SERVICE_TYPE_ALIASES: dict[str, ServiceType] = {
    "spa": "spa",
    "spas": "spa",
    "ms": "ms",
    "microservice": "ms",
    "microservices": "ms",
}
_TRACK_ALIASES = {
    "actual": "actual",
    "planned": "planned",
    "expected": "planned",
}
_SCOPE_KEYS: dict[ServiceType, tuple[str, ...]] = {
    "spa": ("spa",),
    "ms": ("microservice", "ms"),
}


def parse_series_key(key: Any) -> tuple[ServiceType, str] | None:
    """
    Parse a series key such as "spa.actual" or "microservice.expected".

    Returns:
        (service_type, track) with track "actual" or "planned", or None if unrecognised
    """
    if not isinstance(key, str) or "." not in key:
        return None
    type_part, _, track_part = key.strip().lower().partition(".")
    service_type = _SERVICE_TYPE_ALIASES.get(type_part)
    track = _TRACK_ALIASES.get(track_part)
    if service_type is None or track is None:
        return None
    return service_type, track


def coerce_count(value: Any, field_name: str = "count") -> int:
    """
    Validate a remaining/total count from the raw document.

    Negative values are clamped to zero (with a warning). Booleans, strings,
    NaN and infinities are rejected.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{field_name} must be finite, got {value!r}")
    count = int(round(value))
    if count < 0:
        logger.warning("Negative count clamped to zero", extra={"field": field_name, "value": value})
        return 0
    return count


def _parse_raw_point(raw_point: Any) -> tuple[str, int, int, int | None]:
    """Return (date, timestamp, remaining, total) for one raw series point."""
    if not isinstance(raw_point, Mapping):
        raise ValueError(f"Point must be an object, got {type(raw_point).__name__}")

    # Re-derive the date from the parsed timestamp so "2026-01-05" and
    # "2026-01-05T09:30:00Z" land on the same point
    day = epoch_ms_to_date(date_to_epoch_ms(raw_point.get("x")))
    timestamp = date_to_epoch_ms(day)
    remaining = coerce_count(raw_point.get("y"), "y")

    raw_total = raw_point.get("total")
    total = coerce_count(raw_total, "total") if raw_total is not None else None
    return day, timestamp, remaining, total


def _scope_total(scope: Any, service_type: ServiceType) -> int | None:
    """Explicit "in scope" count supplied alongside the target, if any."""
    if not isinstance(scope, Mapping):
        return None
    for key in _SCOPE_KEYS[service_type]:
        entry = scope.get(key)
        value = entry.get("inEnv") if isinstance(entry, Mapping) else entry
        if value is None:
            continue
        try:
            count = coerce_count(value, f"scope.{key}.inEnv")
        except ValueError as e:
            log_and_continue(logger, e, context={"scope_key": key, "value": value}, error_type="Scope parsing")
            continue
        if count > 0:
            return count
    return None


def _as_list(value: Any, field_name: str, context: dict[str, Any]) -> list[Any]:
    """Return ``value`` as a list; a missing value is empty, any other non-list is logged and skipped."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    log_and_continue(
        logger,
        ValueError(f"{field_name} must be a list, got {type(value).__name__}"),
        context={**context, field_name: value},
        error_type="Series parsing",
    )
    return []


def backfill_totals(
    points: Iterable[BurndownPoint],
    spa_total: int | None = None,
    ms_total: int | None = None,
) -> list[BurndownPoint]:
    """
    Sort points by timestamp and fill missing spa_total/ms_total.

    When a total is not given it is taken from the earliest point that
    carries one (or 0). Totals are constant fill-ins, never interpolated.
    Returns new point objects; the input is left untouched. Idempotent.
    """
    ordered = sorted(points, key=lambda p: p.timestamp)
    fill: dict[ServiceType, int | None] = {"spa": spa_total, "ms": ms_total}

    for service_type in SERVICE_TYPES:
        if fill[service_type] is None:
            carried = next((p.total_for(service_type) for p in ordered if p.total_for(service_type) is not None), None)
            fill[service_type] = carried if carried is not None else 0

    return [
        replace(
            point,
            spa_total=point.spa_total if point.spa_total is not None else fill["spa"],
            ms_total=point.ms_total if point.ms_total is not None else fill["ms"],
        )
        for point in ordered
    ]


def normalize_environment(env_data: Mapping[str, Any]) -> tuple[list[BurndownPoint], Targets]:
    """
    Merge one environment's named series into date-ordered burndown points.

    Args:
        env_data: One entry of the raw document's "environments" list

    Returns:
        (points, targets) - points sorted by timestamp with totals backfilled
    """
    env = str(env_data.get("env", ""))
    targets = Targets.from_raw(env_data.get("target"))

    point_map: dict[str, BurndownPoint] = {}
    # earliest (timestamp, total) seen per (service_type, track)
    first_totals: dict[tuple[ServiceType, str], tuple[int, int]] = {}

    for series in _as_list(env_data.get("series"), "series", {"env": env}):
        if not isinstance(series, Mapping):
            log_and_continue(
                logger,
                ValueError(f"Series must be an object, got {type(series).__name__}"),
                context={"env": env, "series": series},
                error_type="Series parsing",
            )
            continue
        parsed_key = parse_series_key(series.get("key"))
        if parsed_key is None:
            logger.debug("Ignoring unrecognised series", extra={"env": env, "series": series.get("key")})
            continue
        service_type, track = parsed_key

        for raw_point in _as_list(series.get("points"), "points", {"env": env, "series": series.get("key")}):
            try:
                day, timestamp, remaining, total = _parse_raw_point(raw_point)
            except ValueError as e:
                log_and_continue(
                    logger,
                    e,
                    context={"env": env, "series": series.get("key"), "point": raw_point},
                    error_type="Point parsing",
                )
                continue

            point = point_map.get(day)
            if point is None:
                point = BurndownPoint(date=day, timestamp=timestamp)
                point_map[day] = point

            field_name = f"{service_type}_{track}"
            existing = getattr(point, field_name)
            if existing is not None and existing != remaining:
                logger.warning(
                    "Conflicting values for one date, keeping the lower remaining count",
                    extra={"env": env, "date": day, "field": field_name, "values": [existing, remaining]},
                )
            # Same-date collisions resolve to min remaining / max total regardless of input order
            setattr(point, field_name, remaining if existing is None else min(existing, remaining))

            if total is None:
                continue
            if track == "actual":
                reported_total = point.total_for(service_type)
                setattr(point, f"{service_type}_total", total if reported_total is None else max(reported_total, total))
            seen = first_totals.get((service_type, track))
            if seen is None or timestamp < seen[0] or (timestamp == seen[0] and total > seen[1]):
                first_totals[(service_type, track)] = (timestamp, total)

    inferred: dict[ServiceType, int] = {}
    for service_type in SERVICE_TYPES:
        scope_total = _scope_total(env_data.get("scope"), service_type)
        actual_total = first_totals.get((service_type, "actual"))
        planned_total = first_totals.get((service_type, "planned"))
        if scope_total is not None:
            inferred[service_type] = scope_total
        elif actual_total is not None:
            inferred[service_type] = actual_total[1]
        elif planned_total is not None:
            inferred[service_type] = planned_total[1]
        else:
            inferred[service_type] = 0

    points = backfill_totals(point_map.values(), spa_total=inferred["spa"], ms_total=inferred["ms"])

    logger.debug(
        "Normalized environment",
        extra={
            "env": env,
            "point_count": len(points),
            "spa_total": inferred["spa"],
            "ms_total": inferred["ms"],
        },
    )
    return points, targets


def _iter_environments(raw: Mapping[str, Any]) -> Iterable[Mapping[str, Any]]:
    """Yield environment entries from either a list or an env-keyed mapping."""
    environments = raw.get("environments")
    if isinstance(environments, Mapping):
        for env, env_data in environments.items():
            if isinstance(env_data, Mapping):
                yield {"env": env, **env_data}
    elif isinstance(environments, list):
        for env_data in environments:
            if isinstance(env_data, Mapping):
                yield env_data


def normalize_burndown_data(
    raw: Mapping[str, Any] | None,
) -> tuple[dict[str, list[BurndownPoint]], dict[str, Targets]]:
    """
    Normalize a raw burndown document.

    Missing or empty input yields empty results, never an error.

    Args:
        raw: Raw burndown document (see module docstring)

    Returns:
        (points_by_env, targets_by_env), both in environment encounter order
    """
    points_by_env: dict[str, list[BurndownPoint]] = {}
    targets_by_env: dict[str, Targets] = {}

    if not raw or not isinstance(raw, Mapping):
        logger.info("No burndown environments to normalize")
        return points_by_env, targets_by_env

    for env_data in _iter_environments(raw):
        env = env_data.get("env")
        if not env:
            logger.warning("Skipping environment without a name")
            continue
        env = str(env)
        if env in points_by_env:
            logger.warning("Duplicate environment in input, keeping the last entry", extra={"env": env})

        points, targets = normalize_environment(env_data)
        points_by_env[env] = points
        targets_by_env[env] = targets

    logger.info("Normalized burndown data", extra={"environment_count": len(points_by_env)})
    return points_by_env, targets_by_env
