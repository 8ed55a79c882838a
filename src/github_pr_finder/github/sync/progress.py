"""Progress tracking for the per-PR sync loop.

Observers (the CLI progress bar, tests) register callbacks and receive a
`ProgressUpdate` after every saved or failed PR.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from github_pr_finder.logging import get_logger

logger = get_logger(__name__)


class ProgressState(StrEnum):
    """State of a tracked operation."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class ProgressUpdate:
    """A progress update event."""

    total: int
    completed: int
    failed: int
    state: ProgressState
    current_item: str | None = None
    error: str | None = None  # most recent item failure
    elapsed_seconds: float = 0.0

    @property
    def processed(self) -> int:
        return self.completed + self.failed

    @property
    def remaining(self) -> int:
        """Number of items remaining."""
        return max(0, self.total - self.processed)

    @property
    def progress_percent(self) -> float:
        """Completion percentage (0-100)."""
        if self.total == 0:
            return 100.0
        return (self.processed / self.total) * 100


ProgressCallback = Callable[[ProgressUpdate], None]


class ProgressTracker:
    """Observable progress tracker for a sync run.

    Usage:
        tracker = ProgressTracker(name="sync octocat/hello-world")
        tracker.on_progress(lambda u: print(f"{u.completed}/{u.total}"))

        tracker.start(total=len(prs))
        for pr in prs:
            tracker.set_current(f"#{pr.number}")
            save(pr)
            tracker.increment()
        tracker.complete()
    """

    def __init__(self, name: str = "operation") -> None:
        self._name = name
        self._total = 0
        self._completed = 0
        self._failed = 0
        self._state = ProgressState.PENDING
        self._current_item: str | None = None
        self._error: str | None = None
        self._start_time: float | None = None
        self._callbacks: list[ProgressCallback] = []

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------
    @property
    def total(self) -> int:
        return self._total

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def failed(self) -> int:
        return self._failed

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time since start in seconds."""
        if self._start_time is None:
            return 0.0
        return time.monotonic() - self._start_time

    # -------------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------------
    def on_progress(self, callback: ProgressCallback) -> None:
        """Register a callback that receives every ProgressUpdate."""
        self._callbacks.append(callback)

    def _notify(self) -> None:
        update = self.get_update()
        for callback in self._callbacks:
            try:
                callback(update)
            except Exception as e:
                # A broken observer must not stop the sync loop
                logger.warning("Progress callback error: {error}", error=e)

    # -------------------------------------------------------------------------
    # State Management
    # -------------------------------------------------------------------------
    def start(self, total: int) -> None:
        """Mark operation as started with `total` items."""
        self._total = total
        self._state = ProgressState.IN_PROGRESS
        self._start_time = time.monotonic()
        logger.debug("Started {name} (total={total})", name=self._name, total=total)
        self._notify()

    def complete(self) -> None:
        """Mark operation as completed."""
        self._state = ProgressState.COMPLETED
        self._current_item = None
        logger.debug(
            "Completed {name}: {completed} saved, {failed} failed in {elapsed:.1f}s",
            name=self._name,
            completed=self._completed,
            failed=self._failed,
            elapsed=self.elapsed_seconds,
        )
        self._notify()

    # -------------------------------------------------------------------------
    # Progress Updates
    # -------------------------------------------------------------------------
    def set_current(self, item: str) -> None:
        """Set the item currently being processed."""
        self._current_item = item
        self._notify()

    def increment(self) -> None:
        """Count one item as completed."""
        self._completed += 1
        self._current_item = None
        self._notify()

    def increment_failed(self, error: str | None = None) -> None:
        """Count one item as failed."""
        self._failed += 1
        self._current_item = None
        self._error = error
        if error:
            logger.warning("{name} item failed: {error}", name=self._name, error=error)
        self._notify()

    def get_update(self) -> ProgressUpdate:
        """Get current progress as an update object."""
        return ProgressUpdate(
            total=self._total,
            completed=self._completed,
            failed=self._failed,
            state=self._state,
            current_item=self._current_item,
            error=self._error,
            elapsed_seconds=self.elapsed_seconds,
        )
