"""Shared test fixtures."""

from collections.abc import AsyncIterator
from datetime import date

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fittrack.core.config import Settings
from fittrack.models.base import Base
from fittrack.services.progression import ProgressionService
from fittrack.services.record_store import RecordStore
from fittrack.services.runs import RunService
from fittrack.services.streak import StreakService
from fittrack.services.workouts import WorkoutService
from tests.fixtures.seed import TODAY


@pytest.fixture
async def async_engine():
    """Create async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncIterator[AsyncSession]:
    """Create async session for testing."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the default streak and progression rules, ignoring .env."""
    return Settings(_env_file=None)


@pytest.fixture
def clock():
    """Fixed clock so streak walks and monthly quotas are deterministic."""

    def today() -> date:
        return TODAY

    return today


@pytest.fixture
def store(async_session: AsyncSession) -> RecordStore:
    """Record store bound to the test session."""
    return RecordStore(async_session)


@pytest.fixture
def streak_service(store: RecordStore, test_settings: Settings, clock) -> StreakService:
    """Streak service on the fixed clock."""
    return StreakService(store, test_settings, today=clock)


@pytest.fixture
def run_service(
    store: RecordStore, streak_service: StreakService, test_settings: Settings, clock
) -> RunService:
    """Run service sharing the streak service and clock."""
    return RunService(store, streak_service, test_settings, today=clock)


@pytest.fixture
def progression_service(store: RecordStore, test_settings: Settings) -> ProgressionService:
    """Progression service."""
    return ProgressionService(store, test_settings)


@pytest.fixture
def workout_service(
    store: RecordStore, progression_service: ProgressionService, clock
) -> WorkoutService:
    """Workout service sharing the progression service and clock."""
    return WorkoutService(store, progression_service, today=clock)
