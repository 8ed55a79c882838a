"""PR Sync module - GitHub to local cache synchronization.

Services:
- PRSyncService: one-shot sync of a registered repository over a date range
- ProgressTracker: observable per-PR progress for the sync loop
"""

from .exceptions import InvalidDateRangeError, RepositoryNotRegisteredError, SyncError
from .pipeline import PRSyncService, sync_window
from .progress import ProgressCallback, ProgressState, ProgressTracker, ProgressUpdate
from .results import DiffStatus, PRSyncOutcome, SyncResult

__all__ = [
    # Service
    "PRSyncService",
    "sync_window",
    # Results
    "DiffStatus",
    "PRSyncOutcome",
    "SyncResult",
    # Progress
    "ProgressCallback",
    "ProgressState",
    "ProgressTracker",
    "ProgressUpdate",
    # Errors
    "InvalidDateRangeError",
    "RepositoryNotRegisteredError",
    "SyncError",
]
