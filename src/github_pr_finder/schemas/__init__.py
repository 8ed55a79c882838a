"""Pydantic schemas for GitHub PR Finder.

This module provides GitHub API parsing, input validation and output
serialization models.
"""

from .base import SchemaBase
from .github_api import GitHubPullRequest, GitHubUser, GitHubUserProfile
from .pr import PRRead, PRRecord
from .repository import MemberRead, RepositoryCreate, RepositoryRead, parse_repo_string

__all__ = [
    # Base
    "SchemaBase",
    # GitHub API
    "GitHubPullRequest",
    "GitHubUser",
    "GitHubUserProfile",
    # PR
    "PRRead",
    "PRRecord",
    # Catalog
    "MemberRead",
    "RepositoryCreate",
    "RepositoryRead",
    "parse_repo_string",
]
