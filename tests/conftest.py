"""Pytest configuration and shared fixtures.

This module provides:
- An in-memory SQLite (aiosqlite) record store per test
- Async session and repository fixtures for repository/service tests
- Pinned clocks for tests that need "today"
"""

# Set environment variables BEFORE any imports that trigger Settings validation
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TIMEZONE_OFFSET_HOURS", "9")

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from exercise_streaks import models  # noqa: F401
from exercise_streaks.core.config import clear_settings_cache
from exercise_streaks.core.database import Base
from exercise_streaks.repositories import ExerciseRecordRepository
from exercise_streaks.services.dates_service import CivilDate, FixedClock

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached process-wide; start every test from the env."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine]:
    """Create a fresh in-memory database engine for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for each test."""
    session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def record_repo(db_session: AsyncSession) -> ExerciseRecordRepository:
    return ExerciseRecordRepository(db_session)


# =============================================================================
# Clock Fixtures
# =============================================================================


@pytest.fixture
def today() -> CivilDate:
    return CivilDate(2024, 6, 3)


@pytest.fixture
def clock(today: CivilDate) -> FixedClock:
    return FixedClock(today)
