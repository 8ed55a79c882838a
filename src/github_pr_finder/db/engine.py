"""Async SQLAlchemy engine and session management.

The cache handle is an explicit object: callers build one `Database` and pass
it (or sessions opened from it) to whatever needs the cache.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import event, pool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from github_pr_finder.db.models import Base
from github_pr_finder.logging import get_logger

if TYPE_CHECKING:
    from github_pr_finder.config import Settings

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: object, _record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine and session factory for one database URL.

    Usage:
        database = Database("sqlite+aiosqlite:///./github_pr_finder.db")
        await database.create_tables()
        async with database.session() as session:
            repos = await RepositoryRepository(session).list_all()
        await database.dispose()
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._url = url
        poolclass = pool.StaticPool if ":memory:" in url else pool.NullPool
        self._engine: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            poolclass=poolclass,
        )
        if url.startswith("sqlite"):
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        """Build a handle from application settings."""
        return cls(settings.database_url)

    @property
    def url(self) -> str:
        return self._url

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that commits on success and rolls back on error.

        Usage:
            async with database.session() as session:
                result = await session.execute(select(PullRequest))
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet.

        Use this for tests and first runs. Alembic migrations cover upgrades.
        """
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("Ensured tables exist for {url}", url=self._url)

    async def drop_tables(self) -> None:
        """Drop all tables.

        WARNING: This will delete all cached data.
        """
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Close all connections held by the engine."""
        await self._engine.dispose()
