"""Tests for PRSyncService.

Tests cover:
- Preconditions (date range, registered repository) before any network call
- Author registration (insert-if-absent)
- Diff size threshold and diff failure degradation
- Idempotent re-sync (replace, never duplicate)
- Per-PR store failures and progress reporting
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from github_pr_finder.config import SyncConfig
from github_pr_finder.db.models import PRState
from github_pr_finder.db.repositories import (
    MemberRepository,
    PullRequestRepository,
    RepositoryRepository,
)
from github_pr_finder.github.exceptions import GitHubClientError, GitHubNotFoundError
from github_pr_finder.github.sync import (
    DiffStatus,
    InvalidDateRangeError,
    PRSyncService,
    ProgressState,
    ProgressUpdate,
    RepositoryNotRegisteredError,
    sync_window,
)
from github_pr_finder.schemas import GitHubPullRequest
from tests.conftest import JAN_05_ISO, JAN_15_ISO, JAN_20_ISO
from tests.factories import make_github_pr
from tests.fixtures import SAMPLE_DIFF

START = date(2024, 1, 1)
END = date(2024, 1, 31)


def _pr(number: int, author: str, changes: int, created_at: str, **kwargs) -> GitHubPullRequest:
    return GitHubPullRequest.model_validate(
        make_github_pr(
            number,
            author=author,
            additions=changes,
            deletions=0,
            created_at=created_at,
            **kwargs,
        )
    )


def window_prs() -> list[GitHubPullRequest]:
    """#12 alice (10 lines), #11 bob (3000 lines), #10 alice (50 lines), newest first."""
    return [
        _pr(12, "alice", 10, JAN_20_ISO),
        _pr(11, "bob", 3000, JAN_15_ISO),
        _pr(10, "alice", 50, JAN_05_ISO),
    ]


@pytest.fixture
def client():
    mock = MagicMock()
    mock.list_pull_requests = AsyncMock(return_value=window_prs())
    mock.fetch_diff = AsyncMock(return_value=SAMPLE_DIFF)
    return mock


@pytest.fixture
async def registered_repo(db_session):
    repo = await RepositoryRepository(db_session).create("octocat", "hello-world")
    await db_session.commit()
    return repo


@pytest.fixture
def service(db_session, client):
    return PRSyncService(
        client=client,
        repo_repository=RepositoryRepository(db_session),
        member_repository=MemberRepository(db_session),
        pr_repository=PullRequestRepository(db_session),
        config=SyncConfig(),
    )


class TestSyncWindow:
    """Tests for the UTC sync window."""

    def test_inclusive_day_bounds(self):
        start, end = sync_window(START, END)

        assert start == datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)
        assert end == datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC)


class TestPreconditions:
    """Preconditions fail before any GitHub call or write."""

    async def test_unregistered_repository(self, db_session, service, client):
        with pytest.raises(RepositoryNotRegisteredError, match="Register it first"):
            await service.sync_repository("octocat", "hello-world", START, END)

        client.list_pull_requests.assert_not_called()
        assert await MemberRepository(db_session).count() == 0

    async def test_start_after_end(self, registered_repo, service, client):
        with pytest.raises(InvalidDateRangeError):
            await service.sync_repository("octocat", "hello-world", END, START)

        client.list_pull_requests.assert_not_called()

    async def test_single_day_window_allowed(self, registered_repo, service, client):
        client.list_pull_requests.return_value = []

        result = await service.sync_repository("octocat", "hello-world", START, START)

        assert result.total == 0
        kwargs = client.list_pull_requests.await_args.kwargs
        assert kwargs["start"] == datetime(2024, 1, 1, tzinfo=UTC)
        assert kwargs["end"] == datetime(2024, 1, 1, 23, 59, 59, tzinfo=UTC)


class TestSyncRepository:
    """End-to-end sync against a mocked client and an in-memory cache."""

    async def test_syncs_window(self, db_session, registered_repo, service, client):
        result = await service.sync_repository("octocat", "hello-world", START, END)

        assert result.total == 3
        assert result.saved == 3
        assert result.diffs_fetched == 2
        assert result.diffs_skipped == 1
        assert result.authors == ["alice", "bob"]
        assert result.members_added == ["alice", "bob"]
        client.list_pull_requests.assert_awaited_once_with(
            "octocat",
            "hello-world",
            start=datetime(2024, 1, 1, tzinfo=UTC),
            end=datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC),
            with_stats=True,
        )

    async def test_large_pr_diff_skipped(self, db_session, registered_repo, service, client):
        await service.sync_repository("octocat", "hello-world", START, END)

        fetched = sorted(call.args[2] for call in client.fetch_diff.await_args_list)
        assert fetched == [10, 12]

        prs = PullRequestRepository(db_session)
        assert (await prs.get_by_number(registered_repo.id, 10)).diff_content == SAMPLE_DIFF
        assert (await prs.get_by_number(registered_repo.id, 11)).diff_content == ""
        assert (await prs.get_by_number(registered_repo.id, 12)).has_diff

    async def test_threshold_is_inclusive(self, db_session, registered_repo, client):
        client.list_pull_requests.return_value = [_pr(20, "alice", 2000, JAN_15_ISO)]
        service = PRSyncService(
            client=client,
            repo_repository=RepositoryRepository(db_session),
            member_repository=MemberRepository(db_session),
            pr_repository=PullRequestRepository(db_session),
            config=SyncConfig(diff_max_changes=2000),
        )

        result = await service.sync_repository("octocat", "hello-world", START, END)

        assert result.outcomes[0].diff_status == DiffStatus.FETCHED

    async def test_authors_registered_with_login_as_display_name(
        self, db_session, registered_repo, service
    ):
        await service.sync_repository("octocat", "hello-world", START, END)

        members = await MemberRepository(db_session).list_all()
        assert [(m.username, m.display_name) for m in members] == [
            ("alice", "alice"),
            ("bob", "bob"),
        ]

    async def test_existing_member_untouched(self, db_session, registered_repo, service):
        await MemberRepository(db_session).create("alice", "Alice Liddell")
        await db_session.commit()

        result = await service.sync_repository("octocat", "hello-world", START, END)

        assert result.members_added == ["bob"]
        alice = await MemberRepository(db_session).get_by_username("alice")
        assert alice.display_name == "Alice Liddell"

    async def test_resync_is_idempotent(self, db_session, registered_repo, service, client):
        first = await service.sync_repository("octocat", "hello-world", START, END)

        client.list_pull_requests.return_value = [
            _pr(12, "alice", 10, JAN_20_ISO, state="closed", merged_at=JAN_20_ISO),
            *window_prs()[1:],
        ]
        second = await service.sync_repository("octocat", "hello-world", START, END)

        assert {o.action for o in first.outcomes} == {"created"}
        assert {o.action for o in second.outcomes} == {"replaced"}
        assert second.members_added == []

        prs = PullRequestRepository(db_session)
        assert await prs.count() == 3
        assert await MemberRepository(db_session).count() == 2
        assert (await prs.get_by_number(registered_repo.id, 12)).state == PRState.MERGED

    async def test_diff_failure_stores_empty_diff(
        self, db_session, registered_repo, service, client
    ):
        async def fetch_diff(owner, repo, number):
            if number == 10:
                raise GitHubNotFoundError("gone")
            return SAMPLE_DIFF

        client.fetch_diff.side_effect = fetch_diff

        result = await service.sync_repository("octocat", "hello-world", START, END)

        assert result.saved == 3
        assert result.diff_failures == 1
        pr = await PullRequestRepository(db_session).get_by_number(registered_repo.id, 10)
        assert pr.diff_content == ""

    async def test_listing_failure_propagates(self, db_session, registered_repo, service, client):
        client.list_pull_requests.side_effect = GitHubClientError("Network error: timeout")

        with pytest.raises(GitHubClientError):
            await service.sync_repository("octocat", "hello-world", START, END)

        assert await MemberRepository(db_session).count() == 0
        assert await PullRequestRepository(db_session).count() == 0

    async def test_store_failure_recorded_and_loop_continues(
        self, db_session, registered_repo, client
    ):
        pr_repository = PullRequestRepository(db_session)
        original_upsert = pr_repository.upsert

        async def flaky_upsert(repository_id, record):
            if record.pr_number == 11:
                raise RuntimeError("disk full")
            return await original_upsert(repository_id, record)

        pr_repository.upsert = flaky_upsert  # type: ignore[method-assign]
        service = PRSyncService(
            client=client,
            repo_repository=RepositoryRepository(db_session),
            member_repository=MemberRepository(db_session),
            pr_repository=pr_repository,
            config=SyncConfig(),
        )

        updates: list[ProgressUpdate] = []
        result = await service.sync_repository(
            "octocat", "hello-world", START, END, on_progress=updates.append
        )

        assert result.saved == 2
        assert result.failed == 1
        assert updates[-1].failed == 1
        assert updates[-1].error == "disk full"
        failed = [o for o in result.outcomes if o.error]
        assert failed[0].pr_number == 11
        assert await pr_repository.count() == 2
        assert await MemberRepository(db_session).count() == 2

    async def test_progress_reported_per_pr(self, registered_repo, service):
        updates: list[ProgressUpdate] = []

        await service.sync_repository(
            "octocat", "hello-world", START, END, on_progress=updates.append
        )

        assert updates[0].total == 3
        assert [u.completed for u in updates if u.current_item is None][-1] == 3
        assert updates[-1].state == ProgressState.COMPLETED

    async def test_with_stats_follows_config(self, db_session, registered_repo, client):
        service = PRSyncService(
            client=client,
            repo_repository=RepositoryRepository(db_session),
            member_repository=MemberRepository(db_session),
            pr_repository=PullRequestRepository(db_session),
            config=SyncConfig(fetch_pr_stats=False),
        )

        await service.sync_repository("octocat", "hello-world", START, END)

        assert client.list_pull_requests.await_args.kwargs["with_stats"] is False
