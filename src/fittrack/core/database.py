"""Database initialization and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fittrack.core.config import settings

logger = structlog.get_logger()


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the async database engine.

    Args:
        database_url: SQLAlchemy URL, defaults to the configured one

    Returns:
        Async SQLAlchemy engine
    """
    engine = create_async_engine(database_url or settings.database_url, echo=False)

    if engine.dialect.name == "sqlite":
        # Enable foreign keys for SQLite so cascades and SET NULL apply
        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_database(engine: AsyncEngine) -> None:
    """Verify the database is reachable and migrations have been applied.

    Does NOT create tables - use Alembic migrations for schema management.
    """
    async with engine.connect() as conn:
        result = await conn.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'alembic_version'")
            if engine.dialect.name == "sqlite"
            else text(
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_name = 'alembic_version'"
            )
        )
        has_migrations = result.scalar() is not None

        if not has_migrations:
            logger.warning(
                "Database migrations have not been applied. "
                "Run 'alembic upgrade head' to initialize the database schema."
            )
        else:
            result = await conn.execute(text("SELECT version_num FROM alembic_version"))
            logger.info("Database initialized", migration_version=result.scalar())


@asynccontextmanager
async def get_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Usage:
        async with get_session(session_maker) as session:
            streak = await StreakService(RecordStore(session)).compute_current_streak()
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
