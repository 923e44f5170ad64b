"""Test data seeding helpers.

All dates are relative to a fixed TODAY in the middle of a month, so
"current month" freeze quotas never straddle a month boundary.
"""

from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.models.run import Run, RunType
from fittrack.models.streak import Streak, StreakFreeze
from fittrack.models.workout import WorkoutSet
from fittrack.schemas.api import ExerciseCreate, SetCreate
from fittrack.schemas.progression import ExerciseSession
from fittrack.services.aggregation import summarize_session

TODAY = date(2026, 3, 18)


def days_ago(n: int) -> date:
    """Calendar day n days before TODAY."""
    return TODAY - timedelta(days=n)


async def add_run(
    session: AsyncSession,
    day: date,
    distance: float = 3.0,
    duration_seconds: int = 1800,
) -> Run:
    """Insert a run directly, bypassing streak updates."""
    run = Run(
        date=day,
        distance=distance,
        duration_seconds=duration_seconds,
        pace=duration_seconds / 60 / distance,
        run_type=RunType.EASY.value,
    )
    session.add(run)
    await session.commit()
    return run


async def add_streak(
    session: AsyncSession,
    start: date,
    length: int = 1,
    is_active: bool = True,
) -> Streak:
    """Insert a streak row directly."""
    streak = Streak(
        start_date=start,
        current_length=length,
        is_active=is_active,
        freezes_used=0,
    )
    session.add(streak)
    await session.commit()
    return streak


async def add_freeze(session: AsyncSession, streak: Streak, day: date) -> StreakFreeze:
    """Insert a freeze row directly, bypassing the monthly quota."""
    freeze = StreakFreeze(streak_id=streak.id, date=day)
    session.add(freeze)
    await session.commit()
    return freeze


def make_session(
    day: date,
    weight: float,
    reps: int = 5,
    sets: int = 3,
    rpe: float | None = None,
) -> ExerciseSession:
    """Build an in-memory exercise session of identical working sets."""
    workout_sets = [
        WorkoutSet(set_number=i + 1, weight=weight, reps=reps, rpe=rpe, is_warmup=False)
        for i in range(sets)
    ]
    return summarize_session(day, workout_sets)


def exercise_payload(
    exercise_id: str,
    weight: float,
    reps: int = 5,
    sets: int = 3,
    rpe: float | None = None,
    name: str = "Barbell Squat",
) -> ExerciseCreate:
    """Exercise payload of identical working sets for WorkoutService.log_workout."""
    return ExerciseCreate(
        exercise_library_id=exercise_id,
        exercise_name=name,
        muscle_groups=["quadriceps"],
        sets=[SetCreate(weight=weight, reps=reps, rpe=rpe) for _ in range(sets)],
    )
