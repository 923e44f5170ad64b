"""Workout, exercise entry and set models."""

import datetime

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fittrack.models.base import Base, TimestampMixin, generate_uuid


class Workout(Base, TimestampMixin):
    """A strength training session."""

    __tablename__ = "workouts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    duration_minutes: Mapped[int | None] = mapped_column("duration", Integer)
    notes: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[str | None] = mapped_column(Text, comment="Comma separated tags")

    exercises: Mapped[list["ExerciseEntry"]] = relationship(
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="ExerciseEntry.order_index",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Workout(id={self.id}, date={self.date})>"


class ExerciseEntry(Base):
    """One exercise performed within a workout."""

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    workout_id: Mapped[str] = mapped_column(
        "workoutId",
        String(36),
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exercise_library_id: Mapped[str] = mapped_column(
        "exerciseLibraryId", String(255), nullable=False, index=True
    )
    exercise_name: Mapped[str] = mapped_column("exerciseName", String(255), nullable=False)
    muscle_groups: Mapped[str] = mapped_column(
        "muscleGroups",
        Text,
        nullable=False,
        default="",
        comment="Comma separated muscle groups",
    )
    order_index: Mapped[int] = mapped_column("orderIndex", Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    workout: Mapped[Workout] = relationship(back_populates="exercises")
    sets: Mapped[list["WorkoutSet"]] = relationship(
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="WorkoutSet.set_number",
        lazy="selectin",
    )


class WorkoutSet(Base):
    """A single set of an exercise."""

    __tablename__ = "sets"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    exercise_id: Mapped[str] = mapped_column(
        "exerciseId",
        String(36),
        ForeignKey("exercises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    set_number: Mapped[int] = mapped_column("setNumber", Integer, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    rpe: Mapped[float | None] = mapped_column(Float, comment="Rate of perceived exertion, 1-10")
    is_warmup: Mapped[bool] = mapped_column("isWarmup", Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.datetime.now(datetime.UTC),
        nullable=False,
    )

    exercise: Mapped[ExerciseEntry] = relationship(back_populates="sets")
