"""Request and response schemas for the HTTP API."""

import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fittrack.models.run import RunType


class RunCreate(BaseModel):
    """Payload for logging a run."""

    distance: float = Field(gt=0, description="Distance in the user's preferred unit")
    duration_seconds: int = Field(ge=0, description="Duration in seconds")
    run_type: RunType = Field(default=RunType.EASY)
    date: datetime.date | None = Field(default=None, description="Calendar day, defaults to today")
    route_name: str | None = None
    weather: str | None = None
    notes: str | None = None


class RunRead(BaseModel):
    """A logged run."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: datetime.date
    distance: float
    duration_seconds: int
    pace: float
    run_type: str
    route_name: str | None = None
    weather: str | None = None
    notes: str | None = None


class RunStats(BaseModel):
    """Aggregated run statistics over a period."""

    total_distance: float
    run_count: int
    total_duration: int
    average_pace: float
    longest_run: float
    fastest_pace: float


class StreakStatus(BaseModel):
    """Current streak state."""

    current_length: int = Field(description="Length from the live walk over runs and freezes")
    is_active: bool
    start_date: datetime.date | None = None
    freezes_used: int = 0
    freezes_remaining: int = 0
    longest_streak: int = 0


class FreezeRequest(BaseModel):
    """Request to exempt a day from breaking the streak."""

    date: datetime.date
    reason: str | None = None


class FreezeResult(BaseModel):
    """Outcome of a freeze request."""

    applied: bool
    freezes_remaining: int


class SetCreate(BaseModel):
    """A set inside a logged workout."""

    weight: float = Field(ge=0)
    reps: int = Field(ge=0)
    rpe: float | None = Field(default=None, ge=1, le=10)
    is_warmup: bool = False
    notes: str | None = None
    timestamp: datetime.datetime | None = None


class ExerciseCreate(BaseModel):
    """An exercise inside a logged workout."""

    exercise_library_id: str
    exercise_name: str
    muscle_groups: list[str] = Field(default_factory=list)
    notes: str | None = None
    sets: list[SetCreate] = Field(default_factory=list)


class WorkoutCreate(BaseModel):
    """Payload for logging a workout."""

    exercises: list[ExerciseCreate]
    date: datetime.date | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)


class PersonalRecordRead(BaseModel):
    """A stored personal record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    exercise_id: str
    record_type: str
    value: float
    weight: float | None = None
    reps: int | None = None
    date: datetime.date
    workout_id: str | None = None
    set_id: str | None = None


class WorkoutSummary(BaseModel):
    """Result of logging a workout."""

    workout_id: str
    date: datetime.date
    volume: float
    new_records: list[PersonalRecordRead]


class SetRead(BaseModel):
    """A stored set."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    set_number: int
    weight: float
    reps: int
    rpe: float | None = None
    is_warmup: bool
    notes: str | None = None


class ExerciseRead(BaseModel):
    """A stored exercise entry with its sets."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    exercise_library_id: str
    exercise_name: str
    muscle_groups: list[str]
    order_index: int
    notes: str | None = None
    sets: list[SetRead]

    @field_validator("muscle_groups", mode="before")
    @classmethod
    def split_muscle_groups(cls, value: str | list[str]) -> list[str]:
        """Stored as a comma separated string."""
        if isinstance(value, str):
            return [group for group in value.split(",") if group]
        return value


class WorkoutRead(BaseModel):
    """A stored workout with exercises and sets."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: datetime.date
    duration_minutes: int | None = None
    notes: str | None = None
    tags: list[str]
    exercises: list[ExerciseRead]

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: str | list[str] | None) -> list[str]:
        """Stored as a comma separated string, or NULL when untagged."""
        if value is None:
            return []
        if isinstance(value, str):
            return [tag for tag in value.split(",") if tag]
        return value


class WorkoutStats(BaseModel):
    """Aggregated strength training statistics."""

    weekly_volume: float
    monthly_workouts: int
    total_workouts: int
    lifetime_volume: float
