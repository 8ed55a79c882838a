"""Tests for GitHub API response schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from github_pr_finder.db.models import PRState
from github_pr_finder.schemas import GitHubPullRequest, GitHubUserProfile
from tests.fixtures import (
    GITHUB_PR_CLOSED_RESPONSE,
    GITHUB_PR_MERGED_RESPONSE,
    GITHUB_PR_RESPONSE,
    GITHUB_USER_PROFILE_RESPONSE,
)


class TestGitHubPullRequest:
    """Tests for parsing pull request payloads."""

    def test_parse_open_pr(self):
        pr = GitHubPullRequest.model_validate(GITHUB_PR_RESPONSE)

        assert pr.number == 11
        assert pr.author == "alice"
        assert pr.created_at == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)
        assert pr.total_changes == 50
        assert pr.cache_state == PRState.OPEN

    def test_merged_pr_state(self):
        pr = GitHubPullRequest.model_validate(GITHUB_PR_MERGED_RESPONSE)
        assert pr.cache_state == PRState.MERGED

    def test_closed_unmerged_pr_state(self):
        pr = GitHubPullRequest.model_validate(GITHUB_PR_CLOSED_RESPONSE)
        assert pr.cache_state == PRState.CLOSED

    def test_list_payload_without_stats(self):
        """The list endpoint has no additions/deletions."""
        payload = {
            k: v
            for k, v in GITHUB_PR_RESPONSE.items()
            if k not in ("additions", "deletions")
        }
        pr = GitHubPullRequest.model_validate(payload)
        assert pr.total_changes == 0

    def test_fields_not_cached_are_ignored(self):
        """closed_at and changed_files are in the payload but not kept."""
        pr = GitHubPullRequest.model_validate(GITHUB_PR_MERGED_RESPONSE)

        dumped = pr.model_dump()
        assert "closed_at" not in dumped
        assert "changed_files" not in dumped
        assert pr.merged_at is not None

    def test_missing_user_rejected(self):
        payload = {k: v for k, v in GITHUB_PR_RESPONSE.items() if k != "user"}
        with pytest.raises(ValidationError):
            GitHubPullRequest.model_validate(payload)

    def test_to_pr_record(self):
        pr = GitHubPullRequest.model_validate(GITHUB_PR_MERGED_RESPONSE)
        record = pr.to_pr_record("diff text")

        assert record.pr_number == 12
        assert record.state == PRState.MERGED
        assert record.merged_at == datetime(2024, 1, 21, 8, 0, tzinfo=UTC)
        assert record.body is None
        assert record.diff_content == "diff text"
        assert record.diff_url == "https://github.com/octocat/hello-world/pull/12.diff"

    def test_to_pr_record_derives_diff_url(self):
        payload = {**GITHUB_PR_RESPONSE, "diff_url": None}
        record = GitHubPullRequest.model_validate(payload).to_pr_record()

        assert record.diff_url == "https://github.com/octocat/hello-world/pull/11.diff"
        assert record.diff_content == ""


class TestGitHubUserProfile:
    """Tests for user profile payloads."""

    def test_parse_profile_ignores_extra_fields(self):
        profile = GitHubUserProfile.model_validate(GITHUB_USER_PROFILE_RESPONSE)

        assert profile.login == "octocat"
        assert profile.name == "The Octocat"
        assert profile.html_url == "https://github.com/octocat"

    def test_profile_without_name(self):
        payload = {**GITHUB_USER_PROFILE_RESPONSE, "name": None}
        assert GitHubUserProfile.model_validate(payload).name is None
