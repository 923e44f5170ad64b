"""API routes."""

from litestar import Router

from fittrack.api.health import health_router
from fittrack.api.runs import runs_router
from fittrack.api.streak import streak_router
from fittrack.api.workouts import workouts_router
from fittrack.core.config import settings

_v1_routers = [
    runs_router,
    streak_router,
    workouts_router,
]

api_v1_router = Router(path=settings.api_prefix, route_handlers=_v1_routers)

# - health_router: /health - no version prefix
# - api_v1_router: /api/v1/* - tracker endpoints
api_routers = [health_router, api_v1_router]

__all__ = ["api_routers"]
