"""Litestar application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from advanced_alchemy.config.asyncio import AsyncSessionConfig
from litestar import Litestar
from litestar.openapi import OpenAPIConfig
from litestar.plugins.sqlalchemy import SQLAlchemyAsyncConfig, SQLAlchemyPlugin
from sqlalchemy.ext.asyncio import AsyncEngine

from fittrack import __version__
from fittrack.api import api_routers
from fittrack.core.config import settings
from fittrack.core.database import create_engine, init_database
from fittrack.core.logging import configure_logging

logger = structlog.get_logger()


def create_app(engine: AsyncEngine | None = None) -> Litestar:
    """Create Litestar application.

    Args:
        engine: Database engine, created from settings when omitted

    Returns:
        Configured Litestar app instance
    """
    configure_logging(settings.log_level)
    db_engine = engine or create_engine()

    @asynccontextmanager
    async def lifespan(app: Litestar) -> AsyncIterator[None]:
        """Verify the database on startup and release it on shutdown."""
        logger.info(
            "Starting fittrack",
            version=__version__,
            database=db_engine.url.render_as_string(hide_password=True),
        )
        await init_database(db_engine)

        yield

        await db_engine.dispose()
        logger.info("Shutdown complete")

    return Litestar(
        route_handlers=api_routers,
        lifespan=[lifespan],
        openapi_config=OpenAPIConfig(
            title="fittrack API",
            version=__version__,
            description="Local API for run streaks, progression advice and personal records",
        ),
        plugins=[
            SQLAlchemyPlugin(
                config=SQLAlchemyAsyncConfig(
                    engine_instance=db_engine,
                    session_dependency_key="session",
                    session_config=AsyncSessionConfig(expire_on_commit=False),
                ),
            ),
        ],
        debug=settings.log_level == "DEBUG",
    )
