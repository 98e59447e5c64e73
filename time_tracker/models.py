"""Canonical data model for the time tracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

MAX_HOURS_PER_DAY = Decimal("24")


class Project(Enum):
    VISO_INTERNAL = "Viso Internal"
    CLIENT_A = "Client A"
    CLIENT_B = "Client B"
    PERSONAL_DEVELOPMENT = "Personal Development"

    @classmethod
    def labels(cls) -> list[str]:
        return [p.value for p in cls]


class Month(Enum):
    JANUARY = "01"
    FEBRUARY = "02"
    MARCH = "03"
    APRIL = "04"
    MAY = "05"
    JUNE = "06"
    JULY = "07"
    AUGUST = "08"
    SEPTEMBER = "09"
    OCTOBER = "10"
    NOVEMBER = "11"
    DECEMBER = "12"

    @property
    def number(self) -> int:
        return int(self.value)

    @classmethod
    def from_number(cls, number: int) -> "Month":
        return cls(f"{number:02d}")


def day_start(day: date) -> datetime:
    """Pin a calendar day to 00:00 UTC, the instant stored for every entry."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


@dataclass(frozen=True)
class EntryCreate:
    """A candidate entry that passed shape validation."""
    date: date
    project: Project
    hours: Decimal
    description: str


@dataclass(frozen=True)
class TimeEntry:
    """A persisted entry. `date` is always 00:00 UTC of the day worked."""
    id: int
    date: datetime
    project: Project
    hours: Decimal
    description: str
    created_at: datetime

    @property
    def day(self) -> date:
        return self.date.astimezone(timezone.utc).date()


@dataclass(frozen=True)
class MonthFilter:
    """Selected year and month for the history view."""
    year: int
    month: Month

    def label(self) -> str:
        return f"{self.year}-{self.month.value}"


@dataclass
class DayBucket:
    """All entries for one calendar date, newest first."""
    date: date
    entries: list[TimeEntry] = field(default_factory=list)
    total: Decimal = Decimal("0")


@dataclass
class History:
    """Date-grouped history view with totals."""
    buckets: list[DayBucket]
    month_filter: Optional[MonthFilter] = None

    @property
    def grand_total(self) -> Decimal:
        return sum((b.total for b in self.buckets), Decimal("0"))

    @property
    def entry_count(self) -> int:
        return sum(len(b.entries) for b in self.buckets)


class TimeTrackerError(Exception):
    """Base class for rejections surfaced to the caller."""
    error_type = "error"

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        self.message = message
        self.errors = errors if errors is not None else [message]
        super().__init__(message)


class InvalidShape(TimeTrackerError):
    """Raised when a request is malformed or missing a field."""
    error_type = "invalid_shape"

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        if len(errors) == 1:
            message = errors[0]
        else:
            message = f"Invalid entry with {len(errors)} error(s):\n" + "\n".join(
                f"  - {e}" for e in errors
            )
        super().__init__(message, errors)


class DailyCapExceeded(TimeTrackerError):
    """Raised when a new entry would push a day's total over the cap."""
    error_type = "daily_cap_exceeded"

    def __init__(self, day: date, limit: Decimal, existing: Decimal, requested: Decimal):
        self.day = day
        self.limit = limit
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Max {_format_hours(limit)} hours per day exceeded for {day.isoformat()} "
            f"({_format_hours(existing)}h already logged, {_format_hours(requested)}h requested)"
        )


class EntryNotFound(TimeTrackerError):
    """Raised when a deletion target does not exist."""
    error_type = "not_found"

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Entry not found: {entry_id}")


def _format_hours(value: Decimal) -> str:
    return format(value.normalize(), "f")
