"""Streak endpoints."""

from litestar import Router, get, post
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.schemas.api import FreezeRequest, FreezeResult, StreakStatus
from fittrack.services.record_store import RecordStore
from fittrack.services.streak import StreakService


@get("/streak", status_code=HTTP_200_OK)
async def get_streak(session: AsyncSession) -> StreakStatus:
    """Current streak.

    The length is recomputed from runs and freezes on every request; the
    cached length on the streak row is not trusted.
    """
    service = StreakService(RecordStore(session))
    streak = await service.get_active_streak()

    return StreakStatus(
        current_length=await service.compute_current_streak(),
        is_active=streak is not None,
        start_date=streak.start_date if streak else None,
        freezes_used=streak.freezes_used if streak else 0,
        freezes_remaining=await service.freezes_remaining(streak),
        longest_streak=await service.get_longest_streak(),
    )


@post("/streak/freezes", status_code=HTTP_200_OK)
async def use_freeze(data: FreezeRequest, session: AsyncSession) -> FreezeResult:
    """Freeze a day so that missing it does not break the streak.

    A rejected freeze (no active streak, monthly quota used) is reported
    with ``applied: false``, not as an error.
    """
    service = StreakService(RecordStore(session))
    applied = await service.use_streak_freeze(data.date, data.reason)
    return FreezeResult(applied=applied, freezes_remaining=await service.freezes_remaining())


@post("/streak/end", status_code=HTTP_200_OK)
async def end_streak(session: AsyncSession) -> dict[str, bool | int]:
    """End the active streak as of today."""
    streak = await StreakService(RecordStore(session)).end_streak()
    return {
        "ended": streak is not None,
        "length": streak.current_length if streak else 0,
    }


streak_router = Router(path="/", route_handlers=[get_streak, use_freeze, end_streak])
