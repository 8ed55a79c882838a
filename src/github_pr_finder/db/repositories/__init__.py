"""Repository pattern implementation for database access.

This module provides repository classes that encapsulate all database
access logic for the catalog, the credential store and the PR cache.
"""

from .base import BaseRepository
from .member import MemberRepository
from .pull_request import PullRequestRepository
from .repository import RepositoryRepository, default_repository_url
from .setting import SettingRepository

__all__ = [
    "BaseRepository",
    "MemberRepository",
    "PullRequestRepository",
    "RepositoryRepository",
    "SettingRepository",
    "default_repository_url",
]
