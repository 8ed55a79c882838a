"""Repository for team Member rows."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_pr_finder.db.exceptions import DuplicateMemberError
from github_pr_finder.db.models import Member

from .base import BaseRepository


class MemberRepository(BaseRepository[Member]):
    """Repository for team members.

    Members are added explicitly from the CLI or implicitly by sync when a
    PR author is first seen.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Member)

    async def list_all(self) -> list[Member]:
        """Get all members ordered by username."""
        stmt = select(Member).order_by(Member.username)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_username(self, username: str) -> Member | None:
        return await self._get_by_field("username", username)

    async def create(self, username: str, display_name: str | None = None) -> Member:
        """Register a new member.

        Args:
            username: GitHub login
            display_name: Optional human-friendly name

        Returns:
            Created member (flushed, has ID)

        Raises:
            DuplicateMemberError: If the username is already registered
        """
        if await self.get_by_username(username) is not None:
            raise DuplicateMemberError(username)

        member = Member(username=username, display_name=display_name or None)
        self.add(member)
        await self.flush()
        return member

    async def insert_if_absent(self, username: str, display_name: str | None = None) -> bool:
        """Add a member unless the username already exists.

        An existing member is left untouched, including its display name.

        Returns:
            True if a new member was inserted
        """
        if await self.get_by_username(username) is not None:
            return False

        self.add(Member(username=username, display_name=display_name))
        await self.flush()
        return True
