"""Run (activity record) model."""

import datetime
from enum import Enum

from sqlalchemy import Date, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.models.base import Base, TimestampMixin, generate_uuid


class RunType(str, Enum):
    """Kind of run being logged."""

    EASY = "easy"
    TEMPO = "tempo"
    INTERVALS = "intervals"
    LONG = "long"
    RECOVERY = "recovery"
    RACE = "race"
    WALK = "walk"


class Run(Base, TimestampMixin):
    """A single logged run.

    Runs are the activity records the streak engine walks over. They are
    immutable once created; the only mutation is deletion.
    """

    __tablename__ = "runs"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    # Calendar day, no time component
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)

    distance: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Distance in the user's preferred unit",
    )
    duration_seconds: Mapped[int] = mapped_column("duration", Integer, nullable=False)
    pace: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Minutes per distance unit",
    )

    run_type: Mapped[str] = mapped_column("runType", String(20), nullable=False)
    route_name: Mapped[str | None] = mapped_column("routeName", String(255))
    weather: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Run(date={self.date}, distance={self.distance}, duration={self.duration_seconds})>"
