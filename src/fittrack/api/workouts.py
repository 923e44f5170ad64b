"""Workout and exercise endpoints."""

from litestar import Router, delete, get, post
from litestar.exceptions import NotFoundException
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED, HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.schemas.api import (
    PersonalRecordRead,
    WorkoutCreate,
    WorkoutRead,
    WorkoutStats,
    WorkoutSummary,
)
from fittrack.schemas.progression import Recommendation
from fittrack.services.aggregation import workout_volume
from fittrack.services.progression import ProgressionService
from fittrack.services.record_store import RecordStore
from fittrack.services.workouts import WorkoutService


@post("/workouts", status_code=HTTP_201_CREATED)
async def log_workout(data: WorkoutCreate, session: AsyncSession) -> WorkoutSummary:
    """Log a workout and report any personal records it set."""
    service = WorkoutService(RecordStore(session))
    workout, records = await service.log_workout(
        data.exercises,
        day=data.date,
        notes=data.notes,
        tags=data.tags,
    )
    return WorkoutSummary(
        workout_id=workout.id,
        date=workout.date,
        volume=workout_volume(s for entry in workout.exercises for s in entry.sets),
        new_records=[PersonalRecordRead.model_validate(r) for r in records],
    )


@get("/workouts", status_code=HTTP_200_OK)
async def list_workouts(
    session: AsyncSession,
    limit: int = Parameter(default=10, ge=1, le=500),
) -> list[WorkoutRead]:
    """Most recent workouts with exercises and sets, newest first."""
    workouts = await WorkoutService(RecordStore(session)).get_recent_workouts(limit)
    return [WorkoutRead.model_validate(w) for w in workouts]


@get("/workouts/stats", status_code=HTTP_200_OK)
async def workout_stats(session: AsyncSession) -> WorkoutStats:
    """Weekly volume, workout counts and lifetime volume."""
    service = WorkoutService(RecordStore(session))
    return WorkoutStats(
        weekly_volume=await service.weekly_volume(),
        monthly_workouts=await service.monthly_workout_count(),
        total_workouts=await service.total_workout_count(),
        lifetime_volume=await service.lifetime_volume(),
    )


@get("/workouts/{workout_id:str}", status_code=HTTP_200_OK)
async def get_workout(workout_id: str, session: AsyncSession) -> WorkoutRead:
    """A single workout with exercises and sets."""
    workout = await WorkoutService(RecordStore(session)).get_workout(workout_id)
    if workout is None:
        raise NotFoundException(detail=f"Workout {workout_id} not found")
    return WorkoutRead.model_validate(workout)


@delete("/workouts/{workout_id:str}", status_code=HTTP_204_NO_CONTENT)
async def delete_workout(workout_id: str, session: AsyncSession) -> None:
    """Delete a workout. Personal records it set are kept."""
    if not await WorkoutService(RecordStore(session)).delete_workout(workout_id):
        raise NotFoundException(detail=f"Workout {workout_id} not found")


@get("/exercises/{exercise_id:str}/recommendation", status_code=HTTP_200_OK)
async def get_recommendation(
    exercise_id: str,
    session: AsyncSession,
    name: str | None = None,
    compound: bool = True,
) -> Recommendation | None:
    """Progressive overload recommendation for the next session.

    Example:
        GET /api/v1/exercises/barbell-squat/recommendation?name=Squat&compound=true
    """
    service = ProgressionService(RecordStore(session))
    return await service.calculate_progression_recommendation(
        exercise_id, name or exercise_id, compound
    )


@get("/exercises/{exercise_id:str}/records", status_code=HTTP_200_OK)
async def get_records(exercise_id: str, session: AsyncSession) -> list[PersonalRecordRead]:
    """Full personal record history for an exercise, newest first."""
    records = await ProgressionService(RecordStore(session)).get_exercise_prs(exercise_id)
    return [PersonalRecordRead.model_validate(r) for r in records]


workouts_router = Router(
    path="/",
    route_handlers=[
        log_workout,
        list_workouts,
        workout_stats,
        get_workout,
        delete_workout,
        get_recommendation,
        get_records,
    ],
)
