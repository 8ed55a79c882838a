"""Pydantic schemas for cached PullRequest rows."""

from datetime import datetime

from pydantic import Field, HttpUrl, field_validator

from github_pr_finder.db.models import PRState

from .base import SchemaBase


class PRRecord(SchemaBase):
    """Complete set of fields written to the cache for one PR.

    A record always replaces the whole cached row, so every field is
    explicit; `diff_content` is "" when the diff was skipped or failed.
    """

    pr_number: int = Field(gt=0, description="PR number")
    title: str = Field(max_length=500, description="PR title")
    body: str | None = Field(default=None, description="PR description (markdown)")
    author: str = Field(min_length=1, max_length=100, description="Author GitHub login")
    state: PRState = Field(default=PRState.OPEN, description="PR state")
    created_at: datetime = Field(description="When the PR was opened (UTC)")
    updated_at: datetime = Field(description="Last update timestamp from GitHub (UTC)")
    merged_at: datetime | None = Field(default=None, description="When the PR was merged (UTC)")
    html_url: str = Field(max_length=500, description="GitHub PR URL")
    diff_url: str = Field(max_length=500, description="GitHub diff URL")
    diff_content: str = Field(default="", description="Unified diff, empty when not fetched")

    @field_validator("html_url", "diff_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Reject values that are not URLs."""
        HttpUrl(v)
        return v


class PRRead(SchemaBase):
    """Schema for reading a cached PR."""

    id: int
    pr_number: int
    repository_id: int
    title: str
    body: str | None
    author: str
    state: PRState
    created_at: datetime
    updated_at: datetime
    merged_at: datetime | None
    html_url: str
    diff_url: str
    diff_content: str | None

    @property
    def has_diff(self) -> bool:
        return bool(self.diff_content)
