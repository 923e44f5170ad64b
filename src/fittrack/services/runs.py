"""Run logging and run statistics."""

from collections.abc import Callable
from datetime import date, timedelta

import structlog

from fittrack.core.config import Settings, settings
from fittrack.models.run import Run, RunType
from fittrack.services.aggregation import calculate_pace, month_bounds, summarize_runs
from fittrack.services.record_store import RecordStore
from fittrack.services.streak import StreakService

logger = structlog.get_logger()


class RunService:
    """Service for logging runs and reading run statistics.

    Logging a qualifying run synchronously refreshes the streak.
    """

    def __init__(
        self,
        store: RecordStore,
        streaks: StreakService | None = None,
        config: Settings | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize run service.

        Args:
            store: Record store bound to a database session
            streaks: Streak service to refresh after each run
            config: Settings, defaults to the global settings
            today: Clock returning the current calendar day
        """
        self.store = store
        self.config = config or settings
        self.today = today
        self.streaks = streaks or StreakService(store, self.config, today)
        self.logger = logger.bind(service="runs")

    def qualifies(self, run: Run) -> bool:
        """Whether a run meets the configured streak thresholds."""
        return (
            run.distance >= self.config.streak_min_distance
            and run.duration_seconds >= self.config.streak_min_duration
        )

    async def log_run(
        self,
        distance: float,
        duration_seconds: int,
        run_type: RunType = RunType.EASY,
        day: date | None = None,
        route_name: str | None = None,
        weather: str | None = None,
        notes: str | None = None,
    ) -> Run:
        """Store a run and refresh the streak if the run qualifies.

        Args:
            distance: Distance in the user's preferred unit
            duration_seconds: Duration in seconds
            run_type: Kind of run
            day: Calendar day, defaults to today
            route_name: Optional route name
            weather: Optional weather note
            notes: Optional free text

        Returns:
            The stored run
        """
        run_day = day or self.today()
        try:
            run = await self.store.insert_run(
                Run(
                    date=run_day,
                    distance=distance,
                    duration_seconds=duration_seconds,
                    pace=calculate_pace(duration_seconds, distance),
                    run_type=RunType(run_type).value,
                    route_name=route_name,
                    weather=weather,
                    notes=notes,
                )
            )
            await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            self.logger.error("Failed to log run", date=str(run_day), error=str(e))
            raise

        self.logger.info("Run logged", run_id=run.id, date=str(run_day), distance=distance)

        if self.qualifies(run):
            await self.streaks.update_streak(run_day)

        return run

    async def get_run(self, run_id: str) -> Run | None:
        return await self.store.get_run(run_id)

    async def get_recent_runs(self, limit: int = 10) -> list[Run]:
        return await self.store.get_recent_runs(limit)

    async def get_runs_in_range(self, start: date, end: date) -> list[Run]:
        return await self.store.get_runs_between(start, end)

    async def delete_run(self, run_id: str) -> bool:
        """Delete a run. The streak is not recomputed until the next run is logged."""
        deleted = await self.store.delete_run(run_id)
        await self.store.commit()
        if deleted:
            self.logger.info("Run deleted", run_id=run_id)
        return deleted

    async def weekly_stats(self) -> dict[str, float | int]:
        """Stats over the last seven days, today included."""
        today = self.today()
        runs = await self.store.get_runs_between(today - timedelta(days=7), today)
        return summarize_runs(runs)

    async def monthly_stats(self) -> dict[str, float | int]:
        """Stats from the first of the current month through today."""
        today = self.today()
        first, _ = month_bounds(today)
        runs = await self.store.get_runs_between(first, today)
        return summarize_runs(runs)

    async def lifetime_stats(self) -> dict[str, float | int]:
        total_distance, total_runs, total_duration = await self.store.run_totals()
        return {
            "total_distance": total_distance,
            "total_runs": total_runs,
            "total_duration": total_duration,
            "longest_streak": await self.store.longest_streak(),
        }
