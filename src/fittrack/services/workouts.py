"""Workout logging and exercise history."""

from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime, timedelta

import structlog

from fittrack.models.personal_record import PersonalRecord
from fittrack.models.workout import ExerciseEntry, Workout, WorkoutSet
from fittrack.schemas.api import ExerciseCreate
from fittrack.schemas.progression import ExerciseSession
from fittrack.services.aggregation import month_bounds, workout_volume
from fittrack.services.progression import ProgressionService
from fittrack.services.record_store import RecordStore

logger = structlog.get_logger()


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def workout_duration_minutes(timestamps: Sequence[datetime]) -> int:
    """Minutes between the first and last set of a workout."""
    if len(timestamps) < 2:
        return 0
    return round((max(timestamps) - min(timestamps)).total_seconds() / 60)


class WorkoutService:
    """Service for logging strength workouts.

    Every logged set is checked for personal records.
    """

    def __init__(
        self,
        store: RecordStore,
        progression: ProgressionService | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize workout service.

        Args:
            store: Record store bound to a database session
            progression: Progression service used for personal records
            today: Clock returning the current calendar day
        """
        self.store = store
        self.progression = progression or ProgressionService(store)
        self.today = today
        self.logger = logger.bind(service="workouts")

    async def log_workout(
        self,
        exercises: Sequence[ExerciseCreate],
        day: date | None = None,
        notes: str | None = None,
        tags: Sequence[str] = (),
    ) -> tuple[Workout, list[PersonalRecord]]:
        """Store a workout with its exercises and sets, then check each set for records.

        The workout and any records it sets are committed together.

        Returns:
            Tuple of (stored workout, newly set personal records)
        """
        workout_day = day or self.today()
        now = datetime.now(UTC)

        entries = []
        for index, exercise in enumerate(exercises):
            entries.append(
                ExerciseEntry(
                    exercise_library_id=exercise.exercise_library_id,
                    exercise_name=exercise.exercise_name,
                    muscle_groups=",".join(exercise.muscle_groups),
                    order_index=index,
                    notes=exercise.notes,
                    sets=[
                        WorkoutSet(
                            set_number=number,
                            weight=s.weight,
                            reps=s.reps,
                            rpe=s.rpe,
                            is_warmup=s.is_warmup,
                            notes=s.notes,
                            timestamp=_as_utc(s.timestamp) if s.timestamp else now,
                        )
                        for number, s in enumerate(exercise.sets, start=1)
                    ],
                )
            )

        timestamps = [s.timestamp for entry in entries for s in entry.sets]
        workout = Workout(
            date=workout_day,
            duration_minutes=workout_duration_minutes(timestamps),
            notes=notes,
            tags=",".join(tags) or None,
            exercises=entries,
        )

        new_records: list[PersonalRecord] = []
        try:
            await self.store.insert_workout(workout)
            for entry in entries:
                for workout_set in entry.sets:
                    new_records.extend(
                        await self.progression.check_and_update_pr(
                            entry.exercise_library_id,
                            workout_set.weight,
                            workout_set.reps,
                            workout_day,
                            workout_id=workout.id,
                            set_id=workout_set.id,
                            commit=False,
                        )
                    )
            await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            self.logger.error("Failed to log workout", date=str(workout_day), error=str(e))
            raise

        self.logger.info(
            "Workout logged",
            workout_id=workout.id,
            exercises=len(entries),
            new_records=len(new_records),
        )
        return workout, new_records

    async def get_workout(self, workout_id: str) -> Workout | None:
        return await self.store.get_workout(workout_id)

    async def get_exercise_history(self, exercise_id: str, limit: int = 20) -> list[ExerciseSession]:
        return await self.store.get_exercise_history(exercise_id, limit)

    async def weekly_volume(self) -> float:
        """Working-set volume over the last seven days."""
        today = self.today()
        workouts = await self.store.get_workouts_between(today - timedelta(days=7), today)
        return sum(
            workout_volume(s for entry in w.exercises for s in entry.sets) for w in workouts
        )

    async def get_recent_workouts(self, limit: int = 10) -> list[Workout]:
        return await self.store.get_recent_workouts(limit)

    async def get_workouts_in_range(self, start: date, end: date) -> list[Workout]:
        return await self.store.get_workouts_between(start, end)

    async def delete_workout(self, workout_id: str) -> bool:
        """Delete a workout with its exercises and sets.

        Personal records it set stay in the history without a workout link.
        """
        try:
            deleted = await self.store.delete_workout(workout_id)
            await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            self.logger.error("Failed to delete workout", workout_id=workout_id, error=str(e))
            raise

        if deleted:
            self.logger.info("Workout deleted", workout_id=workout_id)
        return deleted

    async def monthly_workout_count(self) -> int:
        """Workouts dated on or after the first of the current month."""
        first, _ = month_bounds(self.today())
        return await self.store.count_workouts(start=first)

    async def total_workout_count(self) -> int:
        return await self.store.count_workouts()

    async def lifetime_volume(self) -> float:
        """Working-set volume over every workout ever logged."""
        return await self.store.lifetime_volume()
