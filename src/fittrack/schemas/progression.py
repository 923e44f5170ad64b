"""Schemas for progression recommendations and exercise history."""

from dataclasses import dataclass, field
import datetime
from enum import Enum

from pydantic import BaseModel, Field

from fittrack.models.workout import WorkoutSet


class ProgressionAction(str, Enum):
    """Next training adjustment for an exercise."""

    ADD_WEIGHT = "add_weight"
    ADD_REPS = "add_reps"
    ADD_SETS = "add_sets"
    MAINTAIN = "maintain"
    DELOAD = "deload"


class ExperienceLevel(str, Enum):
    """Lifter experience level used for frequency advice."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Recommendation(BaseModel):
    """Progression recommendation for one exercise."""

    exercise_id: str = Field(description="Exercise library identifier")
    exercise_name: str = Field(description="Display name of the exercise")
    action: ProgressionAction = Field(description="Recommended adjustment")
    reason: str = Field(description="Human readable explanation")
    suggested_weight: float | None = Field(default=None, description="Target working weight")
    suggested_reps: int | None = Field(default=None, description="Target reps per set")
    suggested_sets: int | None = Field(default=None, description="Additional sets to perform")


class WarmupSet(BaseModel):
    """A single recommended warm-up set."""

    weight: float
    reps: int


@dataclass
class ExerciseSession:
    """One workout's aggregated performance for a single exercise.

    Derived on read from the set rows; never stored.
    """

    date: datetime.date
    total_volume: float
    max_weight: float
    total_reps: int
    sets: list[WorkoutSet] = field(default_factory=list)
