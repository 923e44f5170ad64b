"""Database models."""

from fittrack.models.base import Base
from fittrack.models.personal_record import PersonalRecord, PersonalRecordType
from fittrack.models.run import Run, RunType
from fittrack.models.streak import Streak, StreakFreeze
from fittrack.models.workout import ExerciseEntry, Workout, WorkoutSet

__all__ = [
    "Base",
    "ExerciseEntry",
    "PersonalRecord",
    "PersonalRecordType",
    "Run",
    "RunType",
    "Streak",
    "StreakFreeze",
    "Workout",
    "WorkoutSet",
]
