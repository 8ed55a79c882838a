"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure.
See: https://docs.github.com/en/rest/pulls/pulls
     https://docs.github.com/en/rest/users/users
"""

from datetime import datetime

from pydantic import BaseModel, Field

from github_pr_finder.db.models import PRState

from .pr import PRRecord


class GitHubUser(BaseModel):
    """GitHub user object embedded in other API responses."""

    login: str = Field(description="GitHub username")
    id: int = Field(description="GitHub user ID")
    type: str = Field(default="User", description="User type")


class GitHubUserProfile(BaseModel):
    """GitHub user object from GET /users/{username} and GET /user."""

    login: str = Field(description="GitHub username")
    id: int = Field(description="GitHub user ID")
    name: str | None = Field(default=None, description="Profile name")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    html_url: str | None = Field(default=None, description="Profile page URL")
    type: str = Field(default="User", description="User type")


class GitHubPullRequest(BaseModel):
    """GitHub Pull Request object from API.

    Maps to: GET /repos/{owner}/{repo}/pulls and
             GET /repos/{owner}/{repo}/pulls/{number}

    The list endpoint omits additions/deletions; they default to 0.
    """

    number: int = Field(description="PR number")
    html_url: str = Field(description="GitHub PR URL")
    diff_url: str | None = Field(default=None, description="GitHub diff URL")
    state: str = Field(description="PR state (open, closed)")
    title: str = Field(description="PR title")
    body: str | None = Field(default=None, description="PR description")

    user: GitHubUser = Field(description="PR author")

    created_at: datetime = Field(description="When PR was created")
    updated_at: datetime = Field(description="Last update timestamp")
    merged_at: datetime | None = Field(default=None, description="When PR was merged")

    additions: int = Field(default=0, description="Lines added")
    deletions: int = Field(default=0, description="Lines deleted")

    @property
    def author(self) -> str:
        """GitHub login of the PR author."""
        return self.user.login

    @property
    def total_changes(self) -> int:
        """Lines added plus lines deleted."""
        return self.additions + self.deletions

    @property
    def cache_state(self) -> PRState:
        """State as stored in the cache (closed with merged_at is merged)."""
        if self.merged_at is not None:
            return PRState.MERGED
        if self.state == "closed":
            return PRState.CLOSED
        return PRState.OPEN

    def to_pr_record(self, diff_content: str = "") -> PRRecord:
        """Convert to the record written to the cache.

        Args:
            diff_content: Unified diff text, "" when not fetched

        Returns:
            PRRecord carrying every cached field
        """
        return PRRecord(
            pr_number=self.number,
            title=self.title,
            body=self.body,
            author=self.author,
            state=self.cache_state,
            created_at=self.created_at,
            updated_at=self.updated_at,
            merged_at=self.merged_at,
            html_url=self.html_url,
            diff_url=self.diff_url or f"{self.html_url}.diff",
            diff_content=diff_content,
        )
