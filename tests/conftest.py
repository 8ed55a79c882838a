"""Pytest configuration and shared fixtures.

Usage Guide:
- For ORM model tests: import factories from tests.factories
- For GitHub API tests: use dict fixtures from tests.fixtures or make_github_pr
- For CLI tests: use the `cli_env` fixture (file-backed database, no token)
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from github_pr_finder.config import get_settings
from github_pr_finder.db import Database
from github_pr_finder.db.models import Base

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# All hardcoded dates should reference these constants for consistency.
# -----------------------------------------------------------------------------

# Base dates (datetime objects for Pydantic/ORM)
JAN_05 = datetime(2024, 1, 5, 9, 0, 0, tzinfo=UTC)  # Oldest PR in the sync window
JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)  # Middle PR
JAN_20 = datetime(2024, 1, 20, 16, 0, 0, tzinfo=UTC)  # Newest PR in the window
DEC_28 = datetime(2023, 12, 28, 12, 0, 0, tzinfo=UTC)  # Before the window
APR_01 = datetime(2024, 4, 1, 0, 0, 0, tzinfo=UTC)  # First instant of 2024-Q2
JUN_30_LATE = datetime(2024, 6, 30, 23, 59, 59, tzinfo=UTC)  # Last second of 2024-Q2
JUL_01 = datetime(2024, 7, 1, 0, 0, 0, tzinfo=UTC)  # First instant of 2024-Q3

# ISO 8601 strings (for GitHub API mocks)
JAN_05_ISO = "2024-01-05T09:00:00Z"
JAN_15_ISO = "2024-01-15T10:00:00Z"
JAN_20_ISO = "2024-01-20T16:00:00Z"
JAN_21_ISO = "2024-01-21T08:00:00Z"
DEC_28_ISO = "2023-12-28T12:00:00Z"


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create an async session with auto-rollback.

    Changes are rolled back after each test to ensure isolation.
    """
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def database():
    """In-memory Database handle with tables created."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_tables()
    yield db
    await db.dispose()


# -----------------------------------------------------------------------------
# CLI Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point settings at a throwaway SQLite file and clear any token.

    Returns:
        The database URL used by CLI commands in this test
    """
    url = f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("GITHUB_TOKEN", "")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
