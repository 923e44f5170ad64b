"""Tests for run and workout logging."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.config import Settings
from fittrack.models.personal_record import PersonalRecord
from fittrack.models.run import RunType
from fittrack.models.workout import WorkoutSet
from fittrack.schemas.api import ExerciseCreate, SetCreate
from fittrack.services.record_store import RecordStore
from fittrack.services.runs import RunService
from fittrack.services.streak import StreakService
from fittrack.services.workouts import WorkoutService, workout_duration_minutes
from tests.fixtures.seed import TODAY, add_run, add_streak, days_ago, exercise_payload


class TestLogRun:
    """Tests for RunService.log_run."""

    async def test_log_run_computes_pace_and_defaults_to_today(
        self, run_service: RunService
    ) -> None:
        run = await run_service.log_run(distance=5.0, duration_seconds=1500)

        assert run.id is not None
        assert run.date == TODAY
        assert run.pace == pytest.approx(5.0)
        assert run.run_type == RunType.EASY.value

    async def test_qualifying_run_starts_streak(
        self, run_service: RunService, streak_service: StreakService
    ) -> None:
        await run_service.log_run(distance=3.0, duration_seconds=1200)

        streak = await streak_service.get_active_streak()
        assert streak is not None
        assert streak.current_length == 1
        assert streak.start_date == TODAY

    async def test_consecutive_runs_extend_streak(
        self, run_service: RunService, streak_service: StreakService
    ) -> None:
        for n in (2, 1, 0):
            await run_service.log_run(distance=3.0, duration_seconds=1200, day=days_ago(n))

        streak = await streak_service.get_active_streak()
        assert streak.current_length == 3
        assert streak.start_date == days_ago(2)

    async def test_non_qualifying_run_leaves_streak_alone(
        self, store: RecordStore, streak_service: StreakService, clock
    ) -> None:
        config = Settings(_env_file=None, streak_min_distance=3.0)
        service = RunService(store, streak_service, config, today=clock)

        await service.log_run(distance=1.0, duration_seconds=600, run_type=RunType.RECOVERY)

        assert await streak_service.get_active_streak() is None
        assert len(await service.get_recent_runs()) == 1

    async def test_run_type_accepts_string(self, run_service: RunService) -> None:
        run = await run_service.log_run(distance=10.0, duration_seconds=3600, run_type="long")

        assert run.run_type == "long"

    async def test_unknown_run_type_rejected(self, run_service: RunService) -> None:
        with pytest.raises(ValueError):
            await run_service.log_run(distance=1.0, duration_seconds=600, run_type="sprint")


class TestRunQueries:
    """Tests for run lookups, deletion and statistics."""

    async def test_recent_runs_newest_first(
        self, async_session: AsyncSession, run_service: RunService
    ) -> None:
        for n in (5, 1, 3):
            await add_run(async_session, days_ago(n))

        runs = await run_service.get_recent_runs(limit=2)

        assert [r.date for r in runs] == [days_ago(1), days_ago(3)]

    async def test_runs_in_range_inclusive(
        self, async_session: AsyncSession, run_service: RunService
    ) -> None:
        for n in range(6):
            await add_run(async_session, days_ago(n))

        runs = await run_service.get_runs_in_range(days_ago(4), days_ago(2))

        assert sorted(r.date for r in runs) == [days_ago(4), days_ago(3), days_ago(2)]

    async def test_delete_run(self, run_service: RunService) -> None:
        run = await run_service.log_run(distance=3.0, duration_seconds=1200)

        assert await run_service.delete_run(run.id) is True
        assert await run_service.get_run(run.id) is None
        assert await run_service.delete_run(run.id) is False

    async def test_weekly_and_monthly_stats(
        self, async_session: AsyncSession, run_service: RunService
    ) -> None:
        await add_run(async_session, TODAY, distance=5.0, duration_seconds=1500)
        await add_run(async_session, days_ago(3), distance=10.0, duration_seconds=3600)
        await add_run(async_session, days_ago(12), distance=8.0, duration_seconds=2400)
        await add_run(async_session, days_ago(30), distance=20.0, duration_seconds=7200)

        weekly = await run_service.weekly_stats()
        monthly = await run_service.monthly_stats()

        assert weekly["run_count"] == 2
        assert weekly["total_distance"] == pytest.approx(15.0)
        assert weekly["longest_run"] == 10.0
        assert weekly["fastest_pace"] == pytest.approx(5.0)
        assert monthly["run_count"] == 3
        assert monthly["total_duration"] == 7500

    async def test_lifetime_stats(
        self, async_session: AsyncSession, run_service: RunService
    ) -> None:
        await add_run(async_session, days_ago(40), distance=4.0, duration_seconds=1200)
        await add_run(async_session, TODAY, distance=6.0, duration_seconds=1800)
        await add_streak(async_session, start=days_ago(60), length=9, is_active=False)

        stats = await run_service.lifetime_stats()

        assert stats == {
            "total_distance": pytest.approx(10.0),
            "total_runs": 2,
            "total_duration": 3000,
            "longest_streak": 9,
        }

    async def test_lifetime_stats_empty(self, run_service: RunService) -> None:
        stats = await run_service.lifetime_stats()

        assert stats["total_runs"] == 0
        assert stats["total_distance"] == 0.0
        assert stats["longest_streak"] == 0


class TestLogWorkout:
    """Tests for WorkoutService.log_workout."""

    async def test_stores_exercises_and_numbered_sets(
        self, workout_service: WorkoutService
    ) -> None:
        workout, _ = await workout_service.log_workout(
            [exercise_payload("squat", 100), exercise_payload("bench", 80, name="Bench Press")],
            notes="Leg day plus bench",
            tags=["strength", "gym"],
        )

        stored = await workout_service.get_workout(workout.id)
        assert stored.date == TODAY
        assert stored.tags == "strength,gym"
        assert [e.exercise_library_id for e in stored.exercises] == ["squat", "bench"]
        assert [s.set_number for s in stored.exercises[0].sets] == [1, 2, 3]
        assert stored.exercises[0].muscle_groups == "quadriceps"

    async def test_first_workout_sets_records(self, workout_service: WorkoutService) -> None:
        _, records = await workout_service.log_workout([exercise_payload("squat", 100)])

        assert {r.record_type for r in records} == {"max_weight", "1rm", "3rm", "5rm"}
        assert all(r.workout_id is not None for r in records)
        assert all(r.set_id is not None for r in records)

    async def test_repeat_workout_sets_no_records(
        self, async_session: AsyncSession, workout_service: WorkoutService
    ) -> None:
        await workout_service.log_workout([exercise_payload("squat", 100)], day=days_ago(2))
        _, records = await workout_service.log_workout([exercise_payload("squat", 100)])

        assert records == []
        count = await async_session.execute(select(func.count(PersonalRecord.id)))
        assert count.scalar_one() == 4

    async def test_duration_from_set_timestamps(self, workout_service: WorkoutService) -> None:
        start = datetime(2026, 3, 18, 7, 0, tzinfo=UTC)
        exercise = ExerciseCreate(
            exercise_library_id="deadlift",
            exercise_name="Deadlift",
            sets=[
                SetCreate(weight=135, reps=5, timestamp=start),
                SetCreate(weight=185, reps=5, timestamp=start + timedelta(minutes=20)),
                SetCreate(weight=225, reps=3, timestamp=start + timedelta(minutes=47)),
            ],
        )

        workout, _ = await workout_service.log_workout([exercise])

        assert workout.duration_minutes == 47

    def test_duration_needs_two_sets(self) -> None:
        assert workout_duration_minutes([datetime(2026, 3, 18, tzinfo=UTC)]) == 0

    async def test_exercise_history_newest_first(self, workout_service: WorkoutService) -> None:
        for n, weight in ((6, 90), (4, 95), (2, 100)):
            await workout_service.log_workout([exercise_payload("press", weight)], day=days_ago(n))

        history = await workout_service.get_exercise_history("press", limit=2)

        assert [s.date for s in history] == [days_ago(2), days_ago(4)]
        assert [s.max_weight for s in history] == [100, 95]
        assert history[0].total_volume == 1500

    async def test_weekly_volume_excludes_warmups_and_old_workouts(
        self, workout_service: WorkoutService
    ) -> None:
        warmup_and_work = ExerciseCreate(
            exercise_library_id="squat",
            exercise_name="Squat",
            sets=[
                SetCreate(weight=45, reps=10, is_warmup=True),
                SetCreate(weight=200, reps=5),
            ],
        )
        await workout_service.log_workout([warmup_and_work], day=days_ago(1))
        await workout_service.log_workout([exercise_payload("squat", 100)], day=days_ago(20))

        assert await workout_service.weekly_volume() == 1000

    async def test_failed_workout_rolls_back(
        self, async_session: AsyncSession, store: RecordStore, clock
    ) -> None:
        """A failing record check leaves neither the workout nor records behind."""

        class BrokenProgression:
            async def check_and_update_pr(self, *args, **kwargs):
                raise RuntimeError("record check failed")

        service = WorkoutService(store, BrokenProgression(), today=clock)

        with pytest.raises(RuntimeError):
            await service.log_workout([exercise_payload("squat", 100)])

        records = await async_session.execute(select(func.count(PersonalRecord.id)))
        assert records.scalar_one() == 0
        workouts = await store.get_workouts_between(days_ago(7), TODAY)
        assert workouts == []


class TestWorkoutQueries:
    """Tests for workout lookups, deletion and statistics."""

    async def test_recent_workouts_newest_first(self, workout_service: WorkoutService) -> None:
        for n in (5, 1, 3):
            await workout_service.log_workout([exercise_payload("squat", 100)], day=days_ago(n))

        workouts = await workout_service.get_recent_workouts(limit=2)

        assert [w.date for w in workouts] == [days_ago(1), days_ago(3)]
        assert len(workouts[0].exercises[0].sets) == 3

    async def test_workouts_in_range_inclusive(self, workout_service: WorkoutService) -> None:
        for n in range(6):
            await workout_service.log_workout([exercise_payload("squat", 100)], day=days_ago(n))

        workouts = await workout_service.get_workouts_in_range(days_ago(4), days_ago(2))

        assert [w.date for w in workouts] == [days_ago(2), days_ago(3), days_ago(4)]

    async def test_delete_workout_keeps_records(
        self, async_session: AsyncSession, workout_service: WorkoutService
    ) -> None:
        """Deleting removes the workout tree; its records stay without a workout link."""
        workout, records = await workout_service.log_workout([exercise_payload("squat", 100)])

        assert await workout_service.delete_workout(workout.id) is True
        assert await workout_service.get_workout(workout.id) is None
        assert await workout_service.delete_workout(workout.id) is False

        sets = await async_session.execute(select(func.count(WorkoutSet.id)))
        assert sets.scalar_one() == 0
        links = await async_session.execute(select(PersonalRecord.workout_id))
        assert list(links.scalars().all()) == [None] * len(records)

    async def test_workout_counts(self, workout_service: WorkoutService) -> None:
        """The monthly count starts at the first of the current month."""
        for n in (0, 10, 17, 18, 40):
            await workout_service.log_workout([exercise_payload("squat", 100)], day=days_ago(n))

        assert await workout_service.monthly_workout_count() == 3
        assert await workout_service.total_workout_count() == 5

    async def test_lifetime_volume_excludes_warmups(
        self, workout_service: WorkoutService
    ) -> None:
        warmup_and_work = ExerciseCreate(
            exercise_library_id="bench",
            exercise_name="Bench Press",
            sets=[
                SetCreate(weight=45, reps=10, is_warmup=True),
                SetCreate(weight=150, reps=5),
            ],
        )
        await workout_service.log_workout([warmup_and_work], day=days_ago(60))
        await workout_service.log_workout([exercise_payload("squat", 100)])

        assert await workout_service.lifetime_volume() == 750 + 1500

    async def test_empty_totals(self, workout_service: WorkoutService) -> None:
        assert await workout_service.total_workout_count() == 0
        assert await workout_service.lifetime_volume() == 0.0
