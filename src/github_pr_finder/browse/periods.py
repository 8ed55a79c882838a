"""Calendar periods used to filter cached PRs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

_MONTH_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})$")
_QUARTER_RE = re.compile(r"^(?P<year>\d{4})-?Q(?P<quarter>[1-4])$", re.I)


class PeriodKind(str, Enum):
    MONTH = "month"
    QUARTER = "quarter"


@dataclass(frozen=True)
class Period:
    """A calendar month or quarter in UTC.

    `start` is inclusive and `end` is exclusive (start of the next period),
    so a PR created at any time on the last day is inside the period.
    """

    kind: PeriodKind
    year: int
    index: int  # month 1-12 or quarter 1-4

    def __post_init__(self) -> None:
        upper = 12 if self.kind == PeriodKind.MONTH else 4
        if not 1 <= self.index <= upper:
            raise ValueError(f"Invalid {self.kind.value} {self.index} (expected 1-{upper})")
        if not 1 <= self.year <= 9998:
            raise ValueError(f"Invalid year {self.year}")

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------
    @classmethod
    def month(cls, year: int, month: int) -> Period:
        return cls(PeriodKind.MONTH, year, month)

    @classmethod
    def quarter(cls, year: int, quarter: int) -> Period:
        return cls(PeriodKind.QUARTER, year, quarter)

    @classmethod
    def current_month(cls, now: datetime | None = None) -> Period:
        now = now or datetime.now(UTC)
        return cls.month(now.year, now.month)

    @classmethod
    def parse(cls, value: str) -> Period:
        """Parse "YYYY-MM" (month) or "YYYY-Qn" (quarter).

        Raises:
            ValueError: If the value matches neither form or is out of range
        """
        text = value.strip()
        message = f"Invalid period '{value}', expected YYYY-MM or YYYY-Qn"
        try:
            if match := _MONTH_RE.match(text):
                return cls.month(int(match["year"]), int(match["month"]))
            if match := _QUARTER_RE.match(text):
                return cls.quarter(int(match["year"]), int(match["quarter"]))
        except ValueError:
            raise ValueError(message) from None
        raise ValueError(message)

    # -------------------------------------------------------------------------
    # Bounds
    # -------------------------------------------------------------------------
    @property
    def first_month(self) -> int:
        if self.kind == PeriodKind.MONTH:
            return self.index
        return (self.index - 1) * 3 + 1

    @property
    def month_count(self) -> int:
        return 1 if self.kind == PeriodKind.MONTH else 3

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.first_month, 1, tzinfo=UTC)

    @property
    def end(self) -> datetime:
        month = self.first_month + self.month_count
        year = self.year
        if month > 12:
            month -= 12
            year += 1
        return datetime(year, month, 1, tzinfo=UTC)

    @property
    def label(self) -> str:
        if self.kind == PeriodKind.MONTH:
            return f"{self.year}-{self.index:02d}"
        return f"{self.year}-Q{self.index}"

    def contains(self, moment: datetime) -> bool:
        """Check if a timestamp falls in the period (naive values are UTC)."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        return self.start <= moment < self.end

    def __str__(self) -> str:
        return self.label
