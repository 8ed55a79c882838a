"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client (users, PRs, diffs, images)
- ImageCache: data URL cache for GitHub-hosted images in PR bodies
- PR Sync: PRSyncService, SyncResult, ProgressTracker
"""

from .client import GitHubClient, UserValidation, ValidationStatus
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    MissingTokenError,
)
from .images import ImageCache
from .sync import (
    DiffStatus,
    InvalidDateRangeError,
    PRSyncOutcome,
    PRSyncService,
    ProgressTracker,
    ProgressUpdate,
    RepositoryNotRegisteredError,
    SyncError,
    SyncResult,
)

__all__ = [
    # Client
    "GitHubClient",
    "UserValidation",
    "ValidationStatus",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "MissingTokenError",
    # Images
    "ImageCache",
    # PR Sync
    "DiffStatus",
    "InvalidDateRangeError",
    "PRSyncOutcome",
    "PRSyncService",
    "ProgressTracker",
    "ProgressUpdate",
    "RepositoryNotRegisteredError",
    "SyncError",
    "SyncResult",
]
