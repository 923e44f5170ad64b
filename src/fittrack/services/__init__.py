"""Application services."""

from fittrack.services.progression import ProgressionService
from fittrack.services.record_store import RecordStore
from fittrack.services.runs import RunService
from fittrack.services.streak import StreakService
from fittrack.services.workouts import WorkoutService

__all__ = [
    "ProgressionService",
    "RecordStore",
    "RunService",
    "StreakService",
    "WorkoutService",
]
