"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API for
user validation, pull request listing, diff retrieval and image fetches.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from githubkit import GitHub
from githubkit.exception import RequestError, RequestFailed
from pydantic import ValidationError

from github_pr_finder.config import GitHubConfig, get_settings
from github_pr_finder.logging import get_logger
from github_pr_finder.schemas.github_api import GitHubPullRequest, GitHubUserProfile

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    MissingTokenError,
)

logger = get_logger(__name__)

PRState = Literal["open", "closed", "all"]

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


class ValidationStatus(str, Enum):
    """Outcome of a user or token validation call."""

    VALID = "valid"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    ERROR = "error"


@dataclass
class UserValidation:
    """Result of validating a GitHub username or token."""

    status: ValidationStatus
    profile: GitHubUserProfile | None = None
    message: str = ""

    @property
    def valid(self) -> bool:
        return self.status == ValidationStatus.VALID


class GitHubClient:
    """Async GitHub API client.

    Every request carries the token and the configured User-Agent.
    Nothing is retried; a failed call raises once.

    Usage:
        async with GitHubClient(token) as client:
            prs = await client.list_pull_requests(
                "octocat", "hello-world", start=start, end=end
            )
            diff = await client.fetch_diff("octocat", "hello-world", prs[0].number)
    """

    def __init__(self, token: str | None, config: GitHubConfig | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub personal access token
            config: Client settings (defaults to Settings.github)

        Raises:
            MissingTokenError: If the token is empty.
        """
        if not token or not token.strip():
            raise MissingTokenError()
        self._token = token.strip()
        self._config = config or get_settings().github
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            self._client = GitHub(
                self._token,
                user_agent=self._config.user_agent,
                auto_retry=False,
            )
        return self._client

    async def close(self) -> None:
        """Drop the underlying githubkit client."""
        self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------
    async def get_user(self, username: str) -> GitHubUserProfile:
        """Get the public profile of a GitHub user.

        Raises:
            GitHubNotFoundError: If the user does not exist
        """
        try:
            resp = await self._github.rest.users.async_get_by_username(username)
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubClientError(f"Network error: {e}") from e
        return GitHubUserProfile.model_validate(resp.parsed_data.model_dump())

    async def get_authenticated_user(self) -> GitHubUserProfile:
        """Get the profile of the token's owner (GET /user)."""
        try:
            resp = await self._github.rest.users.async_get_authenticated()
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubClientError(f"Network error: {e}") from e
        return GitHubUserProfile.model_validate(resp.parsed_data.model_dump())

    async def validate_user(self, username: str) -> UserValidation:
        """Check that a GitHub username exists.

        Returns:
            VALID with the profile, NOT_FOUND on 404, ERROR otherwise
        """
        username = username.strip()
        if not username:
            return UserValidation(ValidationStatus.INVALID, message="Username is empty")
        try:
            profile = await self.get_user(username)
        except GitHubNotFoundError:
            return UserValidation(
                ValidationStatus.NOT_FOUND, message=f"GitHub user '{username}' not found"
            )
        except GitHubClientError as e:
            logger.warning("User lookup for {username} failed: {error}", username=username, error=e)
            return UserValidation(ValidationStatus.ERROR, message=str(e))
        return UserValidation(ValidationStatus.VALID, profile=profile)

    async def validate_token(self) -> UserValidation:
        """Check that the client's token authenticates.

        Returns:
            VALID with the authenticated identity, INVALID otherwise
        """
        try:
            profile = await self.get_authenticated_user()
        except GitHubClientError as e:
            logger.debug("Token validation failed: {error}", error=e)
            return UserValidation(ValidationStatus.INVALID, message=str(e))
        return UserValidation(ValidationStatus.VALID, profile=profile)

    # -------------------------------------------------------------------------
    # Pull Request Methods
    # -------------------------------------------------------------------------
    async def iter_pull_requests(
        self,
        owner: str,
        repo: str,
        *,
        state: PRState = "all",
        sort: Literal["created", "updated", "popularity", "long-running"] = "created",
        direction: Literal["asc", "desc"] = "desc",
    ) -> AsyncIterator[GitHubPullRequest]:
        """Iterate over pull requests lazily, fetching pages as needed.

        Args:
            owner: Repository owner (org or user)
            repo: Repository name
            state: Filter by state ("open", "closed", "all")
            sort: What to sort results by
            direction: Sort direction ("asc", "desc")

        Yields:
            GitHubPullRequest objects (additions/deletions are 0 here)
        """
        try:
            pr_data: Any
            async for pr_data in self._github.paginate(
                self._github.rest.pulls.async_list,
                owner=owner,
                repo=repo,
                state=state,
                sort=sort,
                direction=direction,
                per_page=self._config.per_page,
            ):
                try:
                    yield GitHubPullRequest.model_validate(pr_data.model_dump())
                except ValidationError:
                    logger.warning(
                        "Skipping unparseable PR in {owner}/{repo}", owner=owner, repo=repo
                    )
                    continue
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubClientError(f"Network error: {e}") from e

    async def get_pull_request(self, owner: str, repo: str, number: int) -> GitHubPullRequest:
        """Get full details for a single pull request, including stats.

        Raises:
            GitHubNotFoundError: If PR doesn't exist
        """
        try:
            resp = await self._github.rest.pulls.async_get(
                owner=owner,
                repo=repo,
                pull_number=number,
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"PR #{number} not found in {owner}/{repo}") from e
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubClientError(f"Network error: {e}") from e
        return GitHubPullRequest.model_validate(resp.parsed_data.model_dump())

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        *,
        start: datetime,
        end: datetime,
        with_stats: bool = True,
    ) -> list[GitHubPullRequest]:
        """List every PR created within [start, end], newest first.

        Pages are requested newest first and iteration stops at the first
        PR created before `start`.

        Args:
            owner: Repository owner
            repo: Repository name
            start: Inclusive lower bound on created_at
            end: Inclusive upper bound on created_at
            with_stats: Fetch each PR's details to fill additions/deletions

        Returns:
            List of GitHubPullRequest objects
        """
        prs: list[GitHubPullRequest] = []
        async for pr in self.iter_pull_requests(owner, repo, state="all"):
            if pr.created_at > end:
                continue
            if pr.created_at < start:
                break
            prs.append(pr)

        logger.debug(
            "Listed {count} PRs in {owner}/{repo}", count=len(prs), owner=owner, repo=repo
        )
        if not with_stats:
            return prs
        return [await self.get_pull_request(owner, repo, pr.number) for pr in prs]

    async def fetch_diff(self, owner: str, repo: str, number: int) -> str:
        """Fetch the unified diff of a pull request.

        Returns:
            Raw diff text
        """
        try:
            resp = await self._github.arequest(
                "GET",
                f"/repos/{owner}/{repo}/pulls/{number}",
                headers={"Accept": DIFF_MEDIA_TYPE},
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"PR #{number} not found in {owner}/{repo}") from e
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubClientError(f"Network error: {e}") from e
        return resp.text

    async def fetch_image(self, url: str) -> bytes:
        """Fetch a (possibly private) GitHub-hosted image with the token.

        Returns:
            Raw image bytes
        """
        try:
            resp = await self._github.arequest("GET", url, headers={"Accept": "*/*"})
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubClientError(f"Network error: {e}") from e
        return resp.content

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status in (403, 429):
            headers = error.response.headers
            if headers.get("x-ratelimit-remaining") == "0":
                reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                return GitHubRateLimitError("GitHub rate limit exceeded", reset_at=reset_at)
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
