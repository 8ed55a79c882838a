"""Tests for catalog and PR record schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from github_pr_finder.db.models import PRState
from github_pr_finder.schemas import PRRead, PRRecord, RepositoryCreate, parse_repo_string
from tests.conftest import JAN_15


def _record(**overrides) -> dict:
    data = {
        "pr_number": 1,
        "title": "Add feature",
        "body": "  leading and trailing whitespace kept  ",
        "author": "alice",
        "state": PRState.OPEN,
        "created_at": JAN_15,
        "updated_at": JAN_15,
        "html_url": "https://github.com/octocat/hello-world/pull/1",
        "diff_url": "https://github.com/octocat/hello-world/pull/1.diff",
    }
    data.update(overrides)
    return data


class TestParseRepoString:
    """Tests for owner/name parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("octocat/hello-world", ("octocat", "hello-world")),
            ("  prebid/Prebid.js ", ("prebid", "Prebid.js")),
            ("my_org/repo_1", ("my_org", "repo_1")),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_repo_string(value) == expected

    @pytest.mark.parametrize("value", ["", "octocat", "a/b/c", "/repo", "owner/", "own er/repo"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_repo_string(value)

    def test_repository_create_from_full_name(self):
        create = RepositoryCreate.from_full_name("octocat/hello-world")
        assert (create.owner, create.name, create.url) == ("octocat", "hello-world", None)


class TestPRRecord:
    """Tests for PRRecord validation."""

    def test_defaults(self):
        record = PRRecord(**_record())
        assert record.diff_content == ""
        assert record.merged_at is None

    def test_whitespace_preserved(self):
        record = PRRecord(**_record())
        assert record.body == "  leading and trailing whitespace kept  "

    def test_rejects_non_positive_number(self):
        with pytest.raises(ValidationError):
            PRRecord(**_record(pr_number=0))

    def test_rejects_invalid_url(self):
        with pytest.raises(ValidationError):
            PRRecord(**_record(html_url="not a url"))

    def test_rejects_empty_author(self):
        with pytest.raises(ValidationError):
            PRRecord(**_record(author=""))


class TestPRRead:
    """Tests for PRRead."""

    def test_has_diff(self):
        base = _record(id=1, repository_id=1, merged_at=None)
        assert PRRead(**base, diff_content="diff").has_diff is True
        assert PRRead(**base, diff_content="").has_diff is False
        assert PRRead(**base, diff_content=None).has_diff is False

    def test_serializes_timestamps(self):
        pr = PRRead(
            **_record(id=1, repository_id=1, merged_at=datetime(2024, 1, 16, tzinfo=UTC)),
            diff_content=None,
        )
        dumped = pr.model_dump(mode="json")
        assert dumped["state"] == "open"
        assert dumped["merged_at"].startswith("2024-01-16")
