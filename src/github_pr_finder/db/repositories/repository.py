"""Repository for registered GitHub Repository rows."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_pr_finder.db.exceptions import DuplicateRepositoryError
from github_pr_finder.db.models import Repository

from .base import BaseRepository


def default_repository_url(owner: str, name: str) -> str:
    """GitHub web URL for owner/name."""
    return f"https://github.com/{owner}/{name}"


class RepositoryRepository(BaseRepository[Repository]):
    """Repository for GitHub Repository entities.

    Handles registration and removal of the repositories that can be synced.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Repository)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def list_all(self) -> list[Repository]:
        """Get all registered repositories ordered by name."""
        stmt = select(Repository).order_by(Repository.name, Repository.owner)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_owner_and_name(self, owner: str, name: str) -> Repository | None:
        """Get a repository by owner and name.

        Args:
            owner: Repository owner (e.g., "octocat")
            name: Repository name (e.g., "hello-world")

        Returns:
            Repository or None if not registered
        """
        stmt = select(Repository).where(
            Repository.owner == owner,
            Repository.name == name,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Create Methods
    # -------------------------------------------------------------------------

    async def create(self, owner: str, name: str, url: str | None = None) -> Repository:
        """Register a new repository.

        Args:
            owner: Repository owner
            name: Repository name
            url: Web URL (defaults to https://github.com/{owner}/{name})

        Returns:
            Created repository (flushed, has ID)

        Raises:
            DuplicateRepositoryError: If owner/name is already registered
        """
        if await self.get_by_owner_and_name(owner, name) is not None:
            raise DuplicateRepositoryError(owner, name)

        repo = Repository(
            owner=owner,
            name=name,
            url=url or default_repository_url(owner, name),
        )
        self.add(repo)
        await self.flush()
        return repo
