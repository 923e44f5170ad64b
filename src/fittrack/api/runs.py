"""Run logging endpoints."""

from typing import Any

from litestar import Router, delete, get, post
from litestar.exceptions import NotFoundException
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED, HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.schemas.api import RunCreate, RunRead, RunStats
from fittrack.services.record_store import RecordStore
from fittrack.services.runs import RunService


@post("/runs", status_code=HTTP_201_CREATED)
async def log_run(data: RunCreate, session: AsyncSession) -> RunRead:
    """Log a run.

    A run meeting the streak thresholds refreshes the current streak before
    the response is returned.
    """
    service = RunService(RecordStore(session))
    run = await service.log_run(
        distance=data.distance,
        duration_seconds=data.duration_seconds,
        run_type=data.run_type,
        day=data.date,
        route_name=data.route_name,
        weather=data.weather,
        notes=data.notes,
    )
    return RunRead.model_validate(run)


@get("/runs", status_code=HTTP_200_OK)
async def list_runs(
    session: AsyncSession,
    limit: int = Parameter(default=10, ge=1, le=500),
) -> list[RunRead]:
    """Most recent runs, newest first."""
    runs = await RunService(RecordStore(session)).get_recent_runs(limit)
    return [RunRead.model_validate(r) for r in runs]


@get("/runs/stats", status_code=HTTP_200_OK)
async def run_stats(session: AsyncSession) -> dict[str, Any]:
    """Weekly, monthly and lifetime run statistics."""
    service = RunService(RecordStore(session))
    return {
        "week": RunStats(**await service.weekly_stats()).model_dump(),
        "month": RunStats(**await service.monthly_stats()).model_dump(),
        "lifetime": await service.lifetime_stats(),
    }


@delete("/runs/{run_id:str}", status_code=HTTP_204_NO_CONTENT)
async def delete_run(run_id: str, session: AsyncSession) -> None:
    """Delete a run."""
    if not await RunService(RecordStore(session)).delete_run(run_id):
        raise NotFoundException(detail=f"Run {run_id} not found")


runs_router = Router(path="/", route_handlers=[log_run, list_runs, run_stats, delete_run])
