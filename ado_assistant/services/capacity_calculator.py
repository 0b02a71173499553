"""
Business-day counting, iteration selection and capacity aggregation.

Pure functions; the capacity service feeds them data fetched from Azure
DevOps.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from ado_assistant.core.constants import PLANNING_PERIOD_COUNT
from ado_assistant.domain.work_item import DaysOff, Iteration, MemberCapacity

SATURDAY = 5


def count_business_days(start: date, end: date) -> int:
    """
    Count Monday-Friday dates in the inclusive range [start, end].

    Returns 0 when start is after end.
    """
    if start > end:
        return 0

    days = 0
    current = start
    while current <= end:
        if current.weekday() < SATURDAY:
            days += 1
        current += timedelta(days=1)
    return days


def count_days_off(days_off: Sequence[DaysOff], start: date, end: date) -> int:
    """Business days of the given days-off ranges that fall inside [start, end]."""
    total = 0
    for entry in days_off:
        total += count_business_days(max(entry.start, start), min(entry.end, end))
    return total


def _normalize_path(path: str) -> str:
    return path.replace("/", "\\").strip("\\").lower()


def _resolve_path(requested: str, iterations: Sequence[Iteration]) -> Optional[Iteration]:
    wanted = _normalize_path(requested)
    if not wanted:
        return None

    for iteration in iterations:
        if _normalize_path(iteration.path) == wanted:
            return iteration
    for iteration in iterations:
        if _normalize_path(iteration.path).endswith("\\" + wanted):
            return iteration
    return None


def select_iterations(
    iterations: Sequence[Iteration],
    requested_paths: Optional[Sequence[str]] = None,
    today: Optional[date] = None,
) -> list[Iteration]:
    """
    Pick the current, next and next+1 planning iterations.

    Three tiers, each used only when the previous one produced fewer than
    three iterations:

    1. Explicitly requested paths (needs at least three requested), resolved
       in request order by exact then suffix match.
    2. Iterations not yet finished, earliest start first.
    3. All iterations, earliest start first.

    Args:
        iterations: Known team iterations
        requested_paths: Iteration paths the caller asked for
        today: Reference date for "not yet finished" (defaults to today)

    Returns:
        Up to three iterations; fewer only when fewer exist in total
    """
    today = today or date.today()

    if requested_paths and len(requested_paths) >= PLANNING_PERIOD_COUNT:
        resolved = []
        for path in requested_paths:
            match = _resolve_path(path, iterations)
            if match is not None:
                resolved.append(match)
        if len(resolved) >= PLANNING_PERIOD_COUNT:
            return resolved[:PLANNING_PERIOD_COUNT]

    by_start = sorted(iterations, key=lambda it: it.start_date)

    upcoming = [it for it in by_start if it.finish_date >= today]
    if len(upcoming) >= PLANNING_PERIOD_COUNT:
        return upcoming[:PLANNING_PERIOD_COUNT]

    return by_start[:PLANNING_PERIOD_COUNT]


def detailed_capacity(records: Sequence[MemberCapacity], iteration: Iteration) -> float:
    """
    Sum per-member, per-activity capacity over an iteration.

    Each activity contributes ``capacityPerDay * (workDays - daysOff)``,
    floored at zero.
    """
    work_days = count_business_days(iteration.start_date, iteration.finish_date)
    total = 0.0
    for record in records:
        net_days = work_days - count_days_off(
            record.days_off, iteration.start_date, iteration.finish_date
        )
        for per_day in record.capacity_per_day:
            total += max(0.0, per_day * net_days)
    return total


def iteration_capacity(
    iteration: Optional[Iteration],
    records: Sequence[MemberCapacity],
    team_size: int,
) -> int:
    """
    Capacity for one planning slot.

    Uses the detailed member records when they sum to something positive,
    otherwise ``workDays * teamSize``. A missing iteration yields 0.
    """
    if iteration is None:
        return 0

    total = detailed_capacity(records, iteration)
    if total <= 0:
        work_days = count_business_days(iteration.start_date, iteration.finish_date)
        total = work_days * max(team_size, 1)

    return max(0, int(round(total)))
