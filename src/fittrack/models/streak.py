"""Streak and streak freeze models."""

import datetime

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.models.base import Base, generate_uuid


class Streak(Base):
    """A run streak.

    current_length is a cached value rewritten by the streak engine; the
    authoritative length always comes from walking runs and freezes.
    """

    __tablename__ = "streaks"
    __table_args__ = (
        # At most one active streak at a time
        Index(
            "ix_streaks_single_active",
            "isActive",
            unique=True,
            sqlite_where=text('"isActive" = 1'),
            postgresql_where=text('"isActive"'),
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    start_date: Mapped[datetime.date] = mapped_column("startDate", Date, nullable=False)
    end_date: Mapped[datetime.date | None] = mapped_column("endDate", Date)
    current_length: Mapped[int] = mapped_column("currentLength", Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column("isActive", Boolean, nullable=False)
    freezes_used: Mapped[int] = mapped_column("freezesUsed", Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Streak(start={self.start_date}, length={self.current_length}, "
            f"active={self.is_active})>"
        )


class StreakFreeze(Base):
    """A day exempted from breaking a streak.

    (streak_id, date) is not unique; a duplicate freeze is harmless.
    """

    __tablename__ = "streak_freezes"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    streak_id: Mapped[str] = mapped_column(
        "streakId",
        String(36),
        ForeignKey("streaks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text)
