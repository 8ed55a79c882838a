"""Browsing cached PRs by member and period."""

from .browser import PRBrowser, neighbours
from .periods import Period, PeriodKind

__all__ = [
    "PRBrowser",
    "Period",
    "PeriodKind",
    "neighbours",
]
