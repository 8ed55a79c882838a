"""Read-only queries behind the PR browser commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from github_pr_finder.db.repositories import (
    MemberRepository,
    PullRequestRepository,
    RepositoryRepository,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from github_pr_finder.db.models import Member, PullRequest, Repository

    from .periods import Period


class PRBrowser:
    """Reads members, repositories and cached PRs for display.

    Usage:
        async with database.session() as session:
            browser = PRBrowser(session)
            prs = await browser.pull_requests("alice", Period.quarter(2024, 2))
    """

    def __init__(self, session: AsyncSession) -> None:
        self._members = MemberRepository(session)
        self._repositories = RepositoryRepository(session)
        self._pull_requests = PullRequestRepository(session)

    async def members(self) -> list[Member]:
        return await self._members.list_all()

    async def repositories_by_id(self) -> dict[int, Repository]:
        """Registered repositories keyed by ID (for labelling PR rows)."""
        return {repo.id: repo for repo in await self._repositories.list_all()}

    async def pull_requests(
        self,
        author: str,
        period: Period,
        *,
        repository_id: int | None = None,
    ) -> list[PullRequest]:
        """PRs by `author` created within `period`, newest first."""
        return await self._pull_requests.list_by_author(
            author,
            period.start,
            period.end,
            repository_id=repository_id,
        )

    async def get(self, pr_id: int) -> PullRequest | None:
        return await self._pull_requests.get_by_id(pr_id)


def neighbours(
    prs: list[PullRequest], current_id: int
) -> tuple[PullRequest | None, PullRequest | None]:
    """Previous and next PR around `current_id` in a listing.

    Returns:
        Tuple of (previous, next); either is None at the ends of the list
        or when `current_id` is not listed
    """
    ids = [pr.id for pr in prs]
    if current_id not in ids:
        return None, None
    position = ids.index(current_id)
    previous = prs[position - 1] if position > 0 else None
    following = prs[position + 1] if position + 1 < len(prs) else None
    return previous, following
