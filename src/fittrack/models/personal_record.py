"""Personal record model."""

import datetime
from enum import Enum

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.models.base import Base, generate_uuid


class PersonalRecordType(str, Enum):
    """Tracked personal record categories."""

    MAX_WEIGHT = "max_weight"
    ONE_RM = "1rm"
    THREE_RM = "3rm"
    FIVE_RM = "5rm"
    TEN_RM = "10rm"


# Rep-specific categories and the minimum reps a set needs to qualify
REP_RECORD_TARGETS: dict[PersonalRecordType, int] = {
    PersonalRecordType.THREE_RM: 3,
    PersonalRecordType.FIVE_RM: 5,
    PersonalRecordType.TEN_RM: 10,
}


class PersonalRecord(Base):
    """A broken personal record.

    Rows are append-only. The current best for an (exercise, record type) pair
    is the row with the highest value; older rows are kept as history.
    """

    __tablename__ = "personal_records"
    __table_args__ = (
        Index("ix_personal_records_exercise_type", "exerciseLibraryId", "recordType"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    exercise_id: Mapped[str] = mapped_column("exerciseLibraryId", String(255), nullable=False)
    record_type: Mapped[str] = mapped_column("recordType", String(20), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    weight: Mapped[float | None] = mapped_column(Float)
    reps: Mapped[int | None] = mapped_column(Integer)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    workout_id: Mapped[str | None] = mapped_column(
        "workoutId",
        String(36),
        ForeignKey("workouts.id", ondelete="SET NULL"),
    )
    set_id: Mapped[str | None] = mapped_column("setId", String(36))

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PersonalRecord(exercise={self.exercise_id}, type={self.record_type}, "
            f"value={self.value:.2f})>"
        )
