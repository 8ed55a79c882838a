"""Result objects for sync operations.

Structured results provide consistent interfaces for logging, tests and
CLI output.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class DiffStatus(str, Enum):
    """What happened to a PR's diff during sync."""

    FETCHED = "fetched"
    SKIPPED_TOO_LARGE = "skipped_too_large"
    FAILED = "failed"


@dataclass
class PRSyncOutcome:
    """Outcome of syncing one PR."""

    pr_number: int
    """GitHub PR number."""

    author: str
    """GitHub login of the PR author."""

    total_changes: int
    """additions + deletions reported by GitHub."""

    diff_status: DiffStatus
    """Whether the diff was fetched, skipped by size, or failed."""

    created: bool = False
    """True if the PR was new to the cache."""

    error: Exception | None = None
    """Exception if storing the PR failed."""

    @property
    def saved(self) -> bool:
        return self.error is None

    @property
    def action(self) -> str:
        """Human-readable description of the action taken."""
        if self.error:
            return "error"
        return "created" if self.created else "replaced"

    def to_dict(self) -> dict[str, object]:
        result: dict[str, object] = {
            "pr_number": self.pr_number,
            "author": self.author,
            "total_changes": self.total_changes,
            "diff_status": self.diff_status.value,
            "action": self.action,
        }
        if self.error:
            result["error"] = str(self.error)
            result["error_type"] = type(self.error).__name__
        return result


@dataclass
class SyncResult:
    """Result of one repository sync over a date range."""

    repository: str
    """Repository in owner/name form."""

    start_date: date
    end_date: date

    outcomes: list[PRSyncOutcome] = field(default_factory=list)
    """One entry per PR in the window, in processing order."""

    authors: list[str] = field(default_factory=list)
    """Distinct PR authors, sorted."""

    members_added: list[str] = field(default_factory=list)
    """Authors that were not yet registered as members."""

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def saved(self) -> int:
        return sum(1 for o in self.outcomes if o.saved)

    @property
    def failed(self) -> int:
        return self.total - self.saved

    @property
    def diffs_fetched(self) -> int:
        return self._count_diffs(DiffStatus.FETCHED)

    @property
    def diffs_skipped(self) -> int:
        return self._count_diffs(DiffStatus.SKIPPED_TOO_LARGE)

    @property
    def diff_failures(self) -> int:
        return self._count_diffs(DiffStatus.FAILED)

    @property
    def success(self) -> bool:
        """True if every PR in the window was stored."""
        return self.failed == 0

    def _count_diffs(self, status: DiffStatus) -> int:
        return sum(1 for o in self.outcomes if o.diff_status == status)

    def summary(self) -> str:
        """One-line summary for CLI output."""
        text = f"Sync complete: {self.saved} PR(s) saved for {self.repository}"
        if self.failed:
            text += f", {self.failed} failed"
        return text

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "repository": self.repository,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total": self.total,
            "saved": self.saved,
            "failed": self.failed,
            "diffs_fetched": self.diffs_fetched,
            "diffs_skipped": self.diffs_skipped,
            "diff_failures": self.diff_failures,
            "authors": self.authors,
            "members_added": self.members_added,
            "prs": [o.to_dict() for o in self.outcomes],
        }
