"""Pure aggregation helpers shared by the services and the API.

Everything here is stateless. Dates are handled as calendar days, never as
timestamps, so results do not depend on the local timezone.
"""

import calendar
import math
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Protocol, TypeVar

from fittrack.schemas.progression import ExerciseSession


class _SetLike(Protocol):
    weight: float
    reps: int
    is_warmup: bool


class _RunLike(Protocol):
    distance: float
    duration_seconds: int
    pace: float


T = TypeVar("T")


def to_calendar_day(value: date | str) -> date:
    """Normalize a date or ``YYYY-MM-DD`` string to a calendar day."""
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


def month_bounds(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def workout_volume(sets: Iterable[_SetLike]) -> float:
    """Total volume (weight x reps) over working sets, warm-ups excluded."""
    return sum(s.weight * s.reps for s in sets if not s.is_warmup)


def calculate_pace(duration_seconds: float, distance: float) -> float:
    """Pace in minutes per distance unit.

    A non-positive distance has no pace; the result is ``math.inf``.
    """
    if distance <= 0:
        return math.inf
    return duration_seconds / 60 / distance


def filter_by_date_range(
    items: Iterable[T],
    start: date | str,
    end: date | str,
    key: Callable[[T], date | str] = lambda item: item.date,  # type: ignore[attr-defined]
) -> list[T]:
    """Keep items whose calendar day falls within [start, end], inclusive."""
    start_day = to_calendar_day(start)
    end_day = to_calendar_day(end)
    return [item for item in items if start_day <= to_calendar_day(key(item)) <= end_day]


def summarize_session(day: date, sets: Sequence[_SetLike]) -> ExerciseSession:
    """Aggregate one exercise's sets from a single workout.

    Volume and reps include every set, warm-ups too.
    """
    return ExerciseSession(
        date=day,
        total_volume=sum(s.weight * s.reps for s in sets),
        max_weight=max((s.weight for s in sets), default=0.0),
        total_reps=sum(s.reps for s in sets),
        sets=list(sets),  # type: ignore[arg-type]
    )


def summarize_runs(runs: Sequence[_RunLike]) -> dict[str, float | int]:
    """Totals, longest run and paces for a list of runs.

    Returns:
        Dict with total_distance, run_count, total_duration, average_pace,
        longest_run and fastest_pace. Paces are 0 when there are no runs.
    """
    total_distance = sum(r.distance for r in runs)
    total_duration = sum(r.duration_seconds for r in runs)

    return {
        "total_distance": total_distance,
        "run_count": len(runs),
        "total_duration": total_duration,
        "average_pace": calculate_pace(total_duration, total_distance) if runs else 0.0,
        "longest_run": max((r.distance for r in runs), default=0.0),
        "fastest_pace": min((r.pace for r in runs), default=0.0),
    }


def muscle_group_volume(entries: Iterable[tuple[str, float]]) -> dict[str, float]:
    """Sum volume per primary muscle group from (muscle_group, volume) pairs."""
    totals: dict[str, float] = {}
    for muscle_group, volume in entries:
        totals[muscle_group] = totals.get(muscle_group, 0.0) + volume
    return totals


def format_pace(pace: float) -> str:
    """Format a pace as ``m:ss``."""
    minutes = math.floor(pace)
    seconds = math.floor((pace - minutes) * 60 + 0.5)
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    return f"{minutes}:{seconds:02d}"


def format_duration(seconds: int) -> str:
    """Format seconds as ``h:mm:ss`` or ``m:ss``."""
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
