"""Daily aggregation engine.

Write path: per-day sums used to enforce the daily cap.
Read path: grouping by day, month filtering and totals for the history view.

Both paths bucket entries with `entry_day`, so a day means exactly the same
thing when enforcing the cap and when rendering totals.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from time_tracker.models import (
    MAX_HOURS_PER_DAY,
    DailyCapExceeded,
    DayBucket,
    EntryCreate,
    History,
    Month,
    MonthFilter,
    TimeEntry,
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def entry_day(value: Any) -> date:
    """Calendar day of an entry date, taken in UTC."""
    if isinstance(value, TimeEntry):
        value = value.date
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(timezone.utc).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Cannot derive a calendar day from {value!r}")


def safe_hours(value: Any) -> Decimal:
    """Hours for display totals: missing or non-finite values count as zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        hours = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not hours.is_finite():
        return Decimal("0")
    return hours


# --- Write path ---

def daily_total(entries: Iterable[TimeEntry], day: date) -> Decimal:
    """Sum of hours already logged for one calendar day."""
    return sum((e.hours for e in entries if entry_day(e) == day), Decimal("0"))


def check_daily_cap(
    candidate: EntryCreate,
    existing: Iterable[TimeEntry],
    limit: Decimal = MAX_HOURS_PER_DAY,
) -> Decimal:
    """Reject the candidate if it would push its day over the limit.

    `existing` should be the stored entries for the candidate's date; entries
    for any other day are ignored. Returns the projected day total.
    """
    existing_sum = daily_total(existing, candidate.date)
    projected = existing_sum + candidate.hours
    if projected > limit:
        raise DailyCapExceeded(
            day=candidate.date,
            limit=limit,
            existing=existing_sum,
            requested=candidate.hours,
        )
    return projected


def remaining_hours(
    entries: Iterable[TimeEntry],
    day: date,
    limit: Decimal = MAX_HOURS_PER_DAY,
) -> Decimal:
    return max(limit - daily_total(entries, day), Decimal("0"))


# --- Read path ---

def filter_by_month(
    entries: Iterable[TimeEntry],
    month_filter: Optional[MonthFilter],
) -> list[TimeEntry]:
    """Keep entries from the selected year and month; None keeps everything."""
    if month_filter is None:
        return list(entries)
    return [
        e for e in entries
        if entry_day(e).year == month_filter.year
        and entry_day(e).month == month_filter.month.number
    ]


def group_by_day(entries: Iterable[TimeEntry]) -> list[DayBucket]:
    """Group entries into day buckets, newest day first.

    Within a bucket entries are ordered by created_at, newest first. The sort
    is stable, so entries created at the same instant keep their input order.
    """
    by_day: dict[date, list[TimeEntry]] = defaultdict(list)
    for entry in entries:
        by_day[entry_day(entry)].append(entry)

    buckets: list[DayBucket] = []
    for day, day_entries in by_day.items():
        ordered = sorted(day_entries, key=_created_key, reverse=True)
        total = sum((safe_hours(e.hours) for e in ordered), Decimal("0"))
        buckets.append(DayBucket(date=day, entries=ordered, total=total))

    buckets.sort(key=lambda b: b.date, reverse=True)
    return buckets


def build_history(
    entries: Iterable[TimeEntry],
    month_filter: Optional[MonthFilter] = None,
) -> History:
    """Filter, group and total a snapshot of entries."""
    filtered = filter_by_month(entries, month_filter)
    return History(buckets=group_by_day(filtered), month_filter=month_filter)


def available_years(entries: Iterable[TimeEntry]) -> list[int]:
    """Distinct years present in the data, most recent first."""
    return sorted({entry_day(e).year for e in entries}, reverse=True)


def available_months(entries: Iterable[TimeEntry], year: int) -> list[Month]:
    """Distinct months present in the data for `year`, most recent first."""
    numbers = {entry_day(e).month for e in entries if entry_day(e).year == year}
    return [Month.from_number(n) for n in sorted(numbers, reverse=True)]


def _created_key(entry: TimeEntry) -> datetime:
    created = entry.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created
