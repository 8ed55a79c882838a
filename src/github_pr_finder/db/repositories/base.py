"""Base repository pattern implementation for async SQLAlchemy.

Provides common session handling and CRUD operations shared by the
catalog, credential and PR cache repositories.
"""

from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from github_pr_finder.db.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Base repository with common async session handling.

    Usage:
        class MemberRepository(BaseRepository[Member]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Member)

            async def get_by_username(self, username: str) -> Member | None:
                return await self._get_by_field("username", username)

    Repositories never commit; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelT]) -> None:
        """Initialize the repository with a session.

        Args:
            session: Async SQLAlchemy session (caller manages lifecycle)
            model_class: The SQLAlchemy model class this repository manages
        """
        self._session = session
        self._model_class = model_class

    @property
    def session(self) -> AsyncSession:
        """Access the underlying session."""
        return self._session

    # -------------------------------------------------------------------------
    # Common Read Operations
    # -------------------------------------------------------------------------

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get an entity by its primary key ID, or None if not found."""
        return await self._session.get(self._model_class, id)

    async def _get_by_field(self, field_name: str, value: object) -> ModelT | None:
        """Get the entity whose `field_name` column equals `value`."""
        stmt = select(self._model_class).where(getattr(self._model_class, field_name) == value)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Count total entities of this type."""
        stmt = select(func.count()).select_from(self._model_class)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    # -------------------------------------------------------------------------
    # Common Write Operations
    # -------------------------------------------------------------------------

    def add(self, entity: ModelT) -> ModelT:
        """Add an entity to the session (does not flush)."""
        self._session.add(entity)
        return entity

    async def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        await self._session.flush()

    async def delete_by_id(self, id: int) -> bool:
        """Delete the entity with the given ID.

        Args:
            id: Primary key ID

        Returns:
            True if an entity was deleted, False if none matched
        """
        entity = await self.get_by_id(id)
        if entity is None:
            return False
        await self._session.delete(entity)
        await self.flush()
        return True
