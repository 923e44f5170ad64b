"""Record store: the storage contract the engines run against.

The store wraps an explicitly passed ``AsyncSession``. Writes are flushed so
generated ids and constraint violations surface immediately; committing is
left to the calling service. Storage errors propagate unchanged.
"""

from datetime import date

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.core.errors import StreakInvariantError
from fittrack.models.personal_record import PersonalRecord
from fittrack.models.run import Run
from fittrack.models.streak import Streak, StreakFreeze
from fittrack.models.workout import ExerciseEntry, Workout, WorkoutSet
from fittrack.schemas.progression import ExerciseSession
from fittrack.services.aggregation import summarize_session


class RecordStore:
    """Async data access for runs, streaks, workouts and personal records."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize record store.

        Args:
            session: Database session
        """
        self.session = session

    async def commit(self) -> None:
        """Commit the current unit of work."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Roll back the current unit of work."""
        await self.session.rollback()

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    async def insert_run(self, run: Run) -> Run:
        """Add a run and flush it."""
        self.session.add(run)
        await self.session.flush()
        return run

    async def query_runs_on_date(self, day: date) -> list[Run]:
        """All runs logged on a calendar day."""
        result = await self.session.execute(select(Run).where(Run.date == day))
        return list(result.scalars().all())

    async def get_run(self, run_id: str) -> Run | None:
        """Run by id, if it exists."""
        return await self.session.get(Run, run_id)

    async def get_recent_runs(self, limit: int = 10) -> list[Run]:
        """Most recent runs, newest first."""
        stmt = select(Run).order_by(Run.date.desc(), Run.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_runs_between(self, start: date, end: date) -> list[Run]:
        """Runs dated within [start, end], newest first."""
        stmt = (
            select(Run)
            .where(Run.date >= start)
            .where(Run.date <= end)
            .order_by(Run.date.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_run(self, run_id: str) -> bool:
        """Delete a run by id. Returns whether a row was removed."""
        result = await self.session.execute(delete(Run).where(Run.id == run_id))
        return result.rowcount > 0

    async def run_totals(self) -> tuple[float, int, int]:
        """Lifetime (total distance, run count, total duration)."""
        stmt = select(
            func.coalesce(func.sum(Run.distance), 0.0),
            func.count(Run.id),
            func.coalesce(func.sum(Run.duration_seconds), 0),
        )
        row = (await self.session.execute(stmt)).one()
        return float(row[0]), int(row[1]), int(row[2])

    # ------------------------------------------------------------------
    # Streaks and freezes
    # ------------------------------------------------------------------

    async def get_active_streak(self) -> Streak | None:
        """The single active streak, if any.

        Raises:
            StreakInvariantError: If more than one streak is active
        """
        stmt = select(Streak).where(Streak.is_active.is_(True)).order_by(Streak.start_date.desc())
        streaks = list((await self.session.execute(stmt)).scalars().all())
        if len(streaks) > 1:
            raise StreakInvariantError([s.id for s in streaks])
        return streaks[0] if streaks else None

    async def insert_streak(self, streak: Streak) -> Streak:
        """Add a streak and flush it."""
        self.session.add(streak)
        await self.session.flush()
        return streak

    async def update_streak_row(self, streak: Streak, **values: object) -> Streak:
        """Apply column updates to a streak and flush them."""
        for name, value in values.items():
            setattr(streak, name, value)
        await self.session.flush()
        return streak

    async def longest_streak(self) -> int:
        """Longest streak length ever recorded, 0 when there are none."""
        stmt = select(func.coalesce(func.max(Streak.current_length), 0))
        return int((await self.session.execute(stmt)).scalar_one())

    async def query_freezes_on_date(self, day: date, streak_id: str) -> list[StreakFreeze]:
        """Freezes of the given streak dated on a calendar day."""
        stmt = (
            select(StreakFreeze)
            .where(StreakFreeze.streak_id == streak_id)
            .where(StreakFreeze.date == day)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def insert_freeze(self, freeze: StreakFreeze) -> StreakFreeze:
        """Add a freeze and flush it."""
        self.session.add(freeze)
        await self.session.flush()
        return freeze

    async def count_freezes(
        self,
        streak_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> int:
        """Count freeze rows of a streak, optionally within [start, end]."""
        stmt = select(func.count(StreakFreeze.id)).where(StreakFreeze.streak_id == streak_id)
        if start is not None:
            stmt = stmt.where(StreakFreeze.date >= start)
        if end is not None:
            stmt = stmt.where(StreakFreeze.date <= end)
        return int((await self.session.execute(stmt)).scalar_one())

    # ------------------------------------------------------------------
    # Workouts and exercise history
    # ------------------------------------------------------------------

    async def insert_workout(self, workout: Workout) -> Workout:
        """Insert a workout together with its exercise entries and sets."""
        self.session.add(workout)
        await self.session.flush()
        return workout

    async def get_workout(self, workout_id: str) -> Workout | None:
        """Workout by id with exercises and sets loaded."""
        stmt = (
            select(Workout)
            .where(Workout.id == workout_id)
            .options(selectinload(Workout.exercises).selectinload(ExerciseEntry.sets))
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def get_recent_workouts(self, limit: int = 10) -> list[Workout]:
        """Most recent workouts with exercises and sets loaded, newest first."""
        stmt = (
            select(Workout)
            .order_by(Workout.date.desc(), Workout.created_at.desc())
            .limit(limit)
            .options(selectinload(Workout.exercises).selectinload(ExerciseEntry.sets))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_workouts_between(self, start: date, end: date) -> list[Workout]:
        """Workouts dated within [start, end], newest first."""
        stmt = (
            select(Workout)
            .where(Workout.date >= start)
            .where(Workout.date <= end)
            .order_by(Workout.date.desc())
            .options(selectinload(Workout.exercises).selectinload(ExerciseEntry.sets))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_workout(self, workout_id: str) -> bool:
        """Delete a workout with its exercises and sets.

        Personal records set during the workout are kept; their workout
        reference is cleared by the foreign key.
        """
        workout = await self.get_workout(workout_id)
        if workout is None:
            return False
        await self.session.delete(workout)
        await self.session.flush()
        return True

    async def count_workouts(self, start: date | None = None) -> int:
        """Count workouts, optionally only those dated on or after ``start``."""
        stmt = select(func.count(Workout.id))
        if start is not None:
            stmt = stmt.where(Workout.date >= start)
        return int((await self.session.execute(stmt)).scalar_one())

    async def lifetime_volume(self) -> float:
        """Sum of weight x reps over every working set ever logged."""
        stmt = select(
            func.coalesce(func.sum(WorkoutSet.weight * WorkoutSet.reps), 0.0)
        ).where(WorkoutSet.is_warmup.is_(False))
        return float((await self.session.execute(stmt)).scalar_one())

    async def get_exercise_history(self, exercise_id: str, limit: int = 20) -> list[ExerciseSession]:
        """Most recent sessions of an exercise, newest first."""
        stmt = (
            select(ExerciseEntry, Workout.date)
            .join(Workout, ExerciseEntry.workout_id == Workout.id)
            .where(ExerciseEntry.exercise_library_id == exercise_id)
            .order_by(Workout.date.desc(), Workout.created_at.desc())
            .limit(limit)
            .options(selectinload(ExerciseEntry.sets))
        )
        rows = (await self.session.execute(stmt)).all()
        return [summarize_session(workout_date, entry.sets) for entry, workout_date in rows]

    # ------------------------------------------------------------------
    # Personal records
    # ------------------------------------------------------------------

    async def get_best_record(self, exercise_id: str, record_type: str) -> PersonalRecord | None:
        """Current best: the highest-valued record for (exercise, type)."""
        stmt = (
            select(PersonalRecord)
            .where(PersonalRecord.exercise_id == exercise_id)
            .where(PersonalRecord.record_type == record_type)
            .order_by(PersonalRecord.value.desc())
            .limit(1)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def insert_personal_record(self, record: PersonalRecord) -> PersonalRecord:
        """Add a personal record and flush it."""
        self.session.add(record)
        await self.session.flush()
        return record

    async def list_personal_records(self, exercise_id: str) -> list[PersonalRecord]:
        """Full record history of an exercise, newest first."""
        stmt = (
            select(PersonalRecord)
            .where(PersonalRecord.exercise_id == exercise_id)
            .order_by(PersonalRecord.date.desc(), PersonalRecord.value.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
