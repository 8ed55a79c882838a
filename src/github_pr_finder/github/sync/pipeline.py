"""PR Sync Service - List → Register authors → Diff → Upsert pipeline.

Pulls every PR of one registered repository created within a date range
into the local cache. The run is one-shot and strictly sequential: one PR
is fetched and written before the next is started.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import TYPE_CHECKING

from github_pr_finder.config import SyncConfig, get_settings
from github_pr_finder.github.exceptions import GitHubClientError
from github_pr_finder.logging import bind_pr, bind_repo

from .exceptions import InvalidDateRangeError, RepositoryNotRegisteredError
from .progress import ProgressCallback, ProgressTracker
from .results import DiffStatus, PRSyncOutcome, SyncResult

if TYPE_CHECKING:
    from loguru import Logger

    from github_pr_finder.db.repositories import (
        MemberRepository,
        PullRequestRepository,
        RepositoryRepository,
    )
    from github_pr_finder.github.client import GitHubClient
    from github_pr_finder.schemas.github_api import GitHubPullRequest


def sync_window(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """UTC bounds of a sync: start_date 00:00:00 to end_date 23:59:59, inclusive."""
    return (
        datetime.combine(start_date, time(0, 0, 0), tzinfo=UTC),
        datetime.combine(end_date, time(23, 59, 59), tzinfo=UTC),
    )


class PRSyncService:
    """Service for syncing one repository's PRs into the cache.

    All three repositories must share one session; the service commits
    after the author registration step and after every stored PR, so a
    failure while storing one PR loses only that PR.

    Usage:
        async with GitHubClient(token) as client:
            async with database.session() as session:
                service = PRSyncService(
                    client=client,
                    repo_repository=RepositoryRepository(session),
                    member_repository=MemberRepository(session),
                    pr_repository=PullRequestRepository(session),
                )
                result = await service.sync_repository(
                    "octocat", "hello-world", date(2024, 1, 1), date(2024, 1, 31)
                )
                print(result.summary())
    """

    def __init__(
        self,
        client: GitHubClient,
        repo_repository: RepositoryRepository,
        member_repository: MemberRepository,
        pr_repository: PullRequestRepository,
        config: SyncConfig | None = None,
    ) -> None:
        """Initialize the sync service.

        Args:
            client: GitHub API client
            repo_repository: Catalog repository for Repository rows
            member_repository: Catalog repository for Member rows
            pr_repository: PR cache repository
            config: Sync policy (defaults to Settings.sync)
        """
        self._client = client
        self._repo_repository = repo_repository
        self._member_repository = member_repository
        self._pr_repository = pr_repository
        self._config = config or get_settings().sync

    async def sync_repository(
        self,
        owner: str,
        name: str,
        start_date: date,
        end_date: date,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> SyncResult:
        """Sync PRs of owner/name created between start_date and end_date.

        Flow:
            1. Check the date range and that the repository is registered
            2. List PRs in the window (one client call)
            3. Register each distinct author as a member if absent
            4. For each PR in order: fetch the diff unless the PR is too
               large, upsert the row, report progress

        Args:
            owner: Repository owner
            name: Repository name
            start_date: First day of the window (UTC)
            end_date: Last day of the window (UTC)
            on_progress: Optional callback receiving a ProgressUpdate after
                         every stored or failed PR

        Returns:
            SyncResult with one outcome per PR

        Raises:
            InvalidDateRangeError: If start_date is after end_date
            RepositoryNotRegisteredError: If owner/name is not in the catalog
            GitHubClientError: If listing the PRs fails (nothing is saved)

        Note:
            Diff failures degrade to an empty diff. A PR that cannot be
            stored is recorded in the result and the loop continues.
        """
        repo_logger = bind_repo(owner, name)

        if start_date > end_date:
            raise InvalidDateRangeError(start_date, end_date)

        repository = await self._repo_repository.get_by_owner_and_name(owner, name)
        if repository is None:
            raise RepositoryNotRegisteredError(owner, name)
        repository_id = repository.id

        # Step 1: List PRs in the window
        start, end = sync_window(start_date, end_date)
        repo_logger.info("Listing PRs from {start} to {end}", start=start_date, end=end_date)
        prs = await self._client.list_pull_requests(
            owner,
            name,
            start=start,
            end=end,
            with_stats=self._config.fetch_pr_stats,
        )

        result = SyncResult(
            repository=f"{owner}/{name}",
            start_date=start_date,
            end_date=end_date,
        )

        # Step 2-3: Register authors
        result.authors = sorted({pr.author for pr in prs})
        result.members_added = await self._register_authors(result.authors)
        if result.members_added:
            repo_logger.info(
                "Registered {count} new member(s)", count=len(result.members_added)
            )
        await self._session_commit()

        # Step 4: Diff + upsert, one PR at a time
        tracker = ProgressTracker(name=f"sync {owner}/{name}")
        if on_progress is not None:
            tracker.on_progress(on_progress)
        tracker.start(total=len(prs))

        for pr in prs:
            tracker.set_current(f"#{pr.number}")
            outcome = await self._sync_pr(owner, name, repository_id, pr)
            result.outcomes.append(outcome)
            if outcome.saved:
                tracker.increment()
            else:
                tracker.increment_failed(str(outcome.error))

        tracker.complete()
        repo_logger.info(
            "Synced {saved}/{total} PRs "
            "({fetched} diffs, {skipped} skipped, {diff_failed} diff failures)",
            saved=result.saved,
            total=result.total,
            fetched=result.diffs_fetched,
            skipped=result.diffs_skipped,
            diff_failed=result.diff_failures,
        )
        return result

    async def _register_authors(self, authors: list[str]) -> list[str]:
        """Insert-if-absent every author. Returns the newly added logins."""
        added: list[str] = []
        for author in authors:
            display_name = author if self._config.default_display_name_to_username else None
            if await self._member_repository.insert_if_absent(author, display_name):
                added.append(author)
        return added

    async def _sync_pr(
        self,
        owner: str,
        name: str,
        repository_id: int,
        pr: GitHubPullRequest,
    ) -> PRSyncOutcome:
        """Fetch the diff for one PR (when allowed) and store it."""
        pr_logger = bind_pr(owner, name, pr.number)

        diff_content, diff_status = await self._fetch_diff(owner, name, pr, pr_logger)
        outcome = PRSyncOutcome(
            pr_number=pr.number,
            author=pr.author,
            total_changes=pr.total_changes,
            diff_status=diff_status,
        )

        try:
            _, outcome.created = await self._pr_repository.upsert(
                repository_id, pr.to_pr_record(diff_content)
            )
            await self._session_commit()
        except Exception as e:
            await self._pr_repository.session.rollback()
            pr_logger.error("Failed to store PR: {error}", error=str(e))
            outcome.error = e
            return outcome

        pr_logger.debug("Stored PR ({action})", action=outcome.action)
        return outcome

    async def _fetch_diff(
        self,
        owner: str,
        name: str,
        pr: GitHubPullRequest,
        pr_logger: Logger,
    ) -> tuple[str, DiffStatus]:
        """Fetch the diff unless the PR exceeds the size limit.

        Returns:
            Tuple of (diff text or "", DiffStatus)
        """
        limit = self._config.diff_max_changes
        if pr.total_changes > limit:
            pr_logger.info(
                "Skipping diff: {changes} changed lines exceed {limit}",
                changes=pr.total_changes,
                limit=limit,
            )
            return "", DiffStatus.SKIPPED_TOO_LARGE

        try:
            diff = await self._client.fetch_diff(owner, name, pr.number)
        except GitHubClientError as e:
            pr_logger.warning("Diff fetch failed, storing empty diff: {error}", error=str(e))
            return "", DiffStatus.FAILED
        return diff, DiffStatus.FETCHED

    async def _session_commit(self) -> None:
        await self._pr_repository.session.commit()
