"""Repository for cached PullRequest rows."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_pr_finder.db.models import PullRequest

from .base import BaseRepository

if TYPE_CHECKING:
    from github_pr_finder.schemas.pr import PRRecord


class PullRequestRepository(BaseRepository[PullRequest]):
    """Repository for cached Pull Requests.

    Rows are keyed by (repository_id, pr_number). Writes go through
    `upsert`, which has last-write-wins semantics: every synced field of an
    existing row is replaced by the incoming record, including fields the
    incoming record leaves empty (body, merged_at, diff_content).
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PullRequest)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_number(self, repository_id: int, pr_number: int) -> PullRequest | None:
        """Get a PR by repository and PR number.

        Args:
            repository_id: Repository ID
            pr_number: PR number

        Returns:
            PullRequest or None if not cached
        """
        stmt = select(PullRequest).where(
            PullRequest.repository_id == repository_id,
            PullRequest.pr_number == pr_number,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_author(
        self,
        author: str,
        start: datetime,
        end: datetime,
        *,
        repository_id: int | None = None,
    ) -> list[PullRequest]:
        """Get PRs by one author created in [start, end), newest first.

        Args:
            author: Exact GitHub login of the PR author
            start: Inclusive lower bound on created_at (UTC)
            end: Exclusive upper bound on created_at (UTC)
            repository_id: Optionally restrict to one repository

        Returns:
            Matching PRs ordered by created_at descending
        """
        stmt = select(PullRequest).where(
            PullRequest.author == author,
            PullRequest.created_at >= start,
            PullRequest.created_at < end,
        )
        if repository_id is not None:
            stmt = stmt.where(PullRequest.repository_id == repository_id)
        stmt = stmt.order_by(PullRequest.created_at.desc(), PullRequest.pr_number.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def upsert(self, repository_id: int, record: PRRecord) -> tuple[PullRequest, bool]:
        """Insert a PR or replace the cached row with the same number.

        Args:
            repository_id: Repository ID
            record: Complete PR data from the latest sync

        Returns:
            Tuple of (PullRequest, created) where created=True if new
        """
        values = self._record_to_dict(record)
        existing = await self.get_by_number(repository_id, record.pr_number)

        if existing is None:
            pr = PullRequest(repository_id=repository_id, pr_number=record.pr_number, **values)
            self.add(pr)
            await self.flush()
            return pr, True

        for key, value in values.items():
            setattr(existing, key, value)
        await self.flush()
        return existing, False

    # -------------------------------------------------------------------------
    # Data Conversion Helpers
    # -------------------------------------------------------------------------

    def _record_to_dict(self, record: PRRecord) -> dict[str, object]:
        """Convert a PRRecord into model field assignments."""
        return {
            "title": record.title,
            "body": record.body,
            "author": record.author,
            "state": record.state,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
            "merged_at": record.merged_at,
            "html_url": record.html_url,
            "diff_url": record.diff_url,
            "diff_content": record.diff_content,
        }
