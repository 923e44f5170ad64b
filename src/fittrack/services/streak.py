"""Streak engine: consecutive-day run streaks with freeze exemptions."""

from collections.abc import Callable
from datetime import date, timedelta

import structlog

from fittrack.core.config import Settings, settings
from fittrack.models.streak import Streak, StreakFreeze
from fittrack.services.aggregation import month_bounds
from fittrack.services.record_store import RecordStore

logger = structlog.get_logger()


class StreakService:
    """Service for computing and maintaining the run streak.

    The streak length is derived lazily by walking backward over runs and
    freezes; the cached ``current_length`` on the streak row is refreshed
    after every qualifying run. There is no background expiry, so a broken
    streak is only noticed the next time the walk runs.

    Operations assume a single writer. Two overlapping calls to
    ``update_streak`` can race on the read-then-write of the streak row.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Settings | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize streak service.

        Args:
            store: Record store bound to a database session
            config: Settings, defaults to the global settings
            today: Clock returning the current calendar day
        """
        self.store = store
        self.config = config or settings
        self.today = today
        self.logger = logger.bind(service="streak")

    async def is_qualifying_day(self, day: date, min_distance: float, min_duration: float) -> bool:
        """Whether any single run on ``day`` meets both thresholds.

        Distance and duration are not summed across runs on the same day.
        """
        runs = await self.store.query_runs_on_date(day)
        return any(r.distance >= min_distance and r.duration_seconds >= min_duration for r in runs)

    async def compute_current_streak(
        self,
        min_distance: float | None = None,
        min_duration: float | None = None,
    ) -> int:
        """Count qualifying days walking backward from today.

        A day with a qualifying run increments the count. A day frozen on the
        active streak, or today while it is still in progress, is skipped
        without incrementing. Any other day ends the walk.

        Args:
            min_distance: Minimum distance, defaults to the configured value
            min_duration: Minimum duration in seconds, defaults to the configured value

        Returns:
            Number of qualifying days in the current streak
        """
        if min_distance is None:
            min_distance = self.config.streak_min_distance
        if min_duration is None:
            min_duration = self.config.streak_min_duration

        today = self.today()
        active = await self.store.get_active_streak()

        count = 0
        day = today
        for _ in range(self.config.streak_safety_limit_days):
            if await self.is_qualifying_day(day, min_distance, min_duration):
                count += 1
            elif active is not None and await self.store.query_freezes_on_date(day, active.id):
                pass
            elif day != today:
                break
            day -= timedelta(days=1)
        else:
            self.logger.warning(
                "Streak walk hit safety limit",
                limit=self.config.streak_safety_limit_days,
                count=count,
            )

        return count

    async def get_active_streak(self) -> Streak | None:
        """The active streak, or None."""
        return await self.store.get_active_streak()

    async def update_streak(self, new_record_date: date) -> Streak:
        """Refresh the active streak after a qualifying run was stored.

        Starts a new streak when none is active, otherwise recomputes and
        persists its length and clears any end date.

        Args:
            new_record_date: Calendar day of the newly stored run

        Returns:
            The created or updated streak
        """
        try:
            streak = await self.store.get_active_streak()

            if streak is None:
                streak = await self.store.insert_streak(
                    Streak(
                        start_date=new_record_date,
                        current_length=1,
                        is_active=True,
                        freezes_used=0,
                    )
                )
                self.logger.info("Started new streak", start_date=str(new_record_date))
            else:
                length = await self.compute_current_streak()
                await self.store.update_streak_row(streak, current_length=length, end_date=None)
                self.logger.debug("Updated streak", streak_id=streak.id, length=length)

            await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            self.logger.error("Streak update failed", error=str(e))
            raise

        return streak

    async def freezes_remaining(self, streak: Streak | None = None) -> int:
        """Freezes still available to the active streak this calendar month.

        Every freeze dated on or after the first of the current month counts,
        including ones dated in later months.
        """
        if streak is None:
            streak = await self.store.get_active_streak()
        if streak is None:
            return 0

        first, _ = month_bounds(self.today())
        used = await self.store.count_freezes(streak.id, start=first)
        return max(self.config.monthly_freezes - used, 0)

    async def use_streak_freeze(self, day: date, reason: str | None = None) -> bool:
        """Exempt a day from breaking the active streak.

        The monthly quota is enforced by counting freeze rows dated within
        the current calendar month. ``freezes_used`` on the streak is then
        rewritten from the row count, so the two never drift apart.

        Args:
            day: Calendar day to freeze
            reason: Optional free-text reason

        Returns:
            True if the freeze was stored, False if there is no active streak
            or the monthly quota is used up
        """
        streak = await self.store.get_active_streak()
        if streak is None:
            self.logger.info("Freeze rejected, no active streak", date=str(day))
            return False

        if await self.freezes_remaining(streak) <= 0:
            self.logger.info(
                "Freeze rejected, monthly quota used",
                streak_id=streak.id,
                quota=self.config.monthly_freezes,
            )
            return False

        try:
            await self.store.insert_freeze(StreakFreeze(streak_id=streak.id, date=day, reason=reason))
            total = await self.store.count_freezes(streak.id)
            await self.store.update_streak_row(streak, freezes_used=total)
            await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            self.logger.error("Streak freeze failed", streak_id=streak.id, error=str(e))
            raise

        self.logger.info("Streak freeze applied", streak_id=streak.id, date=str(day))
        return True

    async def end_streak(self) -> Streak | None:
        """Explicitly end the active streak as of today.

        Returns:
            The ended streak, or None if no streak was active
        """
        streak = await self.store.get_active_streak()
        if streak is None:
            return None

        try:
            await self.store.update_streak_row(streak, is_active=False, end_date=self.today())
            await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            self.logger.error("Ending streak failed", streak_id=streak.id, error=str(e))
            raise

        self.logger.info("Streak ended", streak_id=streak.id, length=streak.current_length)
        return streak

    async def get_longest_streak(self) -> int:
        """Longest streak length ever recorded."""
        return await self.store.longest_streak()
