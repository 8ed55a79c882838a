"""Test fixtures for GitHub PR Finder."""

from .github_responses import (
    GITHUB_PR_CLOSED_RESPONSE,
    GITHUB_PR_MERGED_RESPONSE,
    GITHUB_PR_RESPONSE,
    GITHUB_USER_PROFILE_RESPONSE,
    GITHUB_USER_RESPONSE,
    SAMPLE_DIFF,
)

__all__ = [
    "GITHUB_PR_CLOSED_RESPONSE",
    "GITHUB_PR_MERGED_RESPONSE",
    "GITHUB_PR_RESPONSE",
    "GITHUB_USER_PROFILE_RESPONSE",
    "GITHUB_USER_RESPONSE",
    "SAMPLE_DIFF",
]
