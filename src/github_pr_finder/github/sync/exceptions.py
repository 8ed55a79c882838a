"""Sync precondition errors.

These abort a sync before any network call or database write.
"""

from datetime import date


class SyncError(Exception):
    """Base exception for sync precondition failures."""

    pass


class RepositoryNotRegisteredError(SyncError):
    """Raised when syncing an owner/name that is not in the catalog."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(
            f"Repository {owner}/{name} not found. Register it first with "
            f"'prfinder repo add {owner}/{name}'."
        )
        self.owner = owner
        self.name = name


class InvalidDateRangeError(SyncError):
    """Raised when the start date is after the end date."""

    def __init__(self, start_date: date, end_date: date) -> None:
        super().__init__(f"Start date {start_date} is after end date {end_date}")
        self.start_date = start_date
        self.end_date = end_date
