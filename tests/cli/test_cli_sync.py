"""Tests for the 'sync run' command."""

import json
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from github_pr_finder.cli.app import app
from github_pr_finder.db import MemberRepository, PullRequestRepository, RepositoryRepository
from github_pr_finder.schemas import GitHubPullRequest
from tests.conftest import JAN_05_ISO, JAN_15_ISO, JAN_20_ISO
from tests.factories import make_github_pr
from tests.fixtures import SAMPLE_DIFF

runner = CliRunner()

WINDOW = ["--start", "2024-01-01", "--end", "2024-01-31"]


def _pr(number: int, author: str, changes: int, created_at: str) -> GitHubPullRequest:
    return GitHubPullRequest.model_validate(
        make_github_pr(number, author=author, additions=changes, deletions=0, created_at=created_at)
    )


@pytest.fixture
def registered(cli_env):
    result = runner.invoke(app, ["repo", "add", "octocat/hello-world"])
    assert result.exit_code == 0


@pytest.fixture
def with_token(cli_env):
    runner.invoke(app, ["token", "set", "ghp_stored", "--no-validate"])


@pytest.fixture
def synced_client(github_client):
    github_client.list_pull_requests = AsyncMock(
        return_value=[
            _pr(12, "alice", 10, JAN_20_ISO),
            _pr(11, "bob", 3000, JAN_15_ISO),
            _pr(10, "alice", 50, JAN_05_ISO),
        ]
    )
    github_client.fetch_diff = AsyncMock(return_value=SAMPLE_DIFF)
    return github_client


class TestSyncPreconditions:
    """Argument and precondition failures exit non-zero without calling GitHub."""

    def test_unregistered_repository(self, cli_env, with_token, github_client):
        result = runner.invoke(app, ["sync", "run", "octocat/hello-world", *WINDOW])

        assert result.exit_code == 1
        assert "Register it first" in result.stdout
        github_client.constructors[2].assert_not_called()

    def test_invalid_repo_format(self, cli_env):
        result = runner.invoke(app, ["sync", "run", "hello-world", *WINDOW])

        assert result.exit_code == 1
        assert "owner/name" in result.stdout

    def test_invalid_date(self, registered):
        result = runner.invoke(
            app,
            ["sync", "run", "octocat/hello-world", "--start", "2024-13-01", "--end", "2024-12-31"],
        )

        assert result.exit_code == 1
        assert "YYYY-MM-DD" in result.stdout

    def test_start_after_end(self, registered, github_client):
        result = runner.invoke(
            app,
            ["sync", "run", "octocat/hello-world", "--start", "2024-02-01", "--end", "2024-01-01"],
        )

        assert result.exit_code == 1
        github_client.constructors[2].assert_not_called()

    def test_missing_token(self, registered, github_client):
        result = runner.invoke(app, ["sync", "run", "octocat/hello-world", *WINDOW])

        assert result.exit_code == 1
        assert "token set" in result.stdout
        github_client.constructors[2].assert_not_called()


class TestSyncRun:
    """Successful syncs against a mocked GitHub client."""

    def test_json_result(self, registered, with_token, synced_client, seed):
        result = runner.invoke(
            app, ["--quiet", "sync", "run", "octocat/hello-world", *WINDOW, "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["repository"] == "octocat/hello-world"
        assert data["saved"] == 3
        assert data["diffs_fetched"] == 2
        assert data["diffs_skipped"] == 1
        assert data["members_added"] == ["alice", "bob"]
        assert synced_client.constructors[2].call_args.args[0] == "ghp_stored"

        async def _counts(session):
            return (
                await PullRequestRepository(session).count(),
                await MemberRepository(session).count(),
            )

        assert seed(_counts) == (3, 2)

    def test_text_summary(self, registered, with_token, synced_client):
        result = runner.invoke(app, ["--quiet", "sync", "run", "octocat/hello-world", *WINDOW])

        assert result.exit_code == 0
        assert "Sync Complete" in result.stdout
        assert "3/3" in result.stdout
        assert "alice, bob" in result.stdout

    def test_resync_replaces_rows(self, registered, with_token, synced_client, seed):
        runner.invoke(app, ["--quiet", "sync", "run", "octocat/hello-world", *WINDOW])
        result = runner.invoke(
            app, ["--quiet", "sync", "run", "octocat/hello-world", *WINDOW, "--format", "json"]
        )

        data = json.loads(result.stdout)
        assert {pr["action"] for pr in data["prs"]} == {"replaced"}
        assert data["members_added"] == []

        async def _count(session):
            return await PullRequestRepository(session).count()

        assert seed(_count) == 3

    def test_environment_token_used(self, registered, synced_client, monkeypatch):
        from github_pr_finder.config import get_settings

        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        get_settings.cache_clear()

        result = runner.invoke(app, ["--quiet", "sync", "run", "octocat/hello-world", *WINDOW])

        assert result.exit_code == 0
        assert synced_client.constructors[2].call_args.args[0] == "ghp_env"

    def test_listing_failure_reported(self, registered, with_token, github_client, seed):
        from github_pr_finder.github import GitHubAuthenticationError

        github_client.list_pull_requests = AsyncMock(
            side_effect=GitHubAuthenticationError("Invalid GitHub token")
        )

        result = runner.invoke(app, ["--quiet", "sync", "run", "octocat/hello-world", *WINDOW])

        assert result.exit_code == 1
        assert "Sync failed" in result.stdout

        async def _repo(session):
            return await RepositoryRepository(session).get_by_owner_and_name(
                "octocat", "hello-world"
            )

        assert seed(_repo) is not None
