"""Database module for GitHub PR Finder."""

from github_pr_finder.db.engine import Database
from github_pr_finder.db.exceptions import (
    CatalogError,
    DuplicateMemberError,
    DuplicateRepositoryError,
)
from github_pr_finder.db.models import (
    Base,
    Member,
    PRState,
    PullRequest,
    Repository,
    Setting,
    SettingKey,
)
from github_pr_finder.db.repositories import (
    BaseRepository,
    MemberRepository,
    PullRequestRepository,
    RepositoryRepository,
    SettingRepository,
)

__all__ = [
    # Models
    "Base",
    "Member",
    "PRState",
    "PullRequest",
    "Repository",
    "Setting",
    "SettingKey",
    # Engine
    "Database",
    # Exceptions
    "CatalogError",
    "DuplicateMemberError",
    "DuplicateRepositoryError",
    # Repositories
    "BaseRepository",
    "MemberRepository",
    "PullRequestRepository",
    "RepositoryRepository",
    "SettingRepository",
]
