"""Entry service: validation, daily cap and store composed into operations.

Creation holds a per-date lock from the existing-sum read until the insert
returns, so two requests for the same day cannot both pass the cap check on
a stale total. The lock is process-local: several processes writing to one
database can still race, which is accepted as best effort.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from time_tracker.engine.aggregator import (
    available_months,
    available_years,
    build_history,
    check_daily_cap,
    daily_total,
    remaining_hours,
)
from time_tracker.engine.validator import validate_entry, validate_entry_id
from time_tracker.locks import DateLocks
from time_tracker.models import (
    MAX_HOURS_PER_DAY,
    DailyCapExceeded,
    History,
    InvalidShape,
    Month,
    MonthFilter,
    TimeEntry,
)
from time_tracker.storage import EntryStore

logger = logging.getLogger(__name__)


class EntryService:
    def __init__(self, store: EntryStore, max_hours_per_day: Decimal = MAX_HOURS_PER_DAY):
        self.store = store
        self.max_hours_per_day = max_hours_per_day
        self._locks = DateLocks()

    def create_entry(self, payload: Mapping[str, Any]) -> TimeEntry:
        """Validate and persist an entry, or raise InvalidShape / DailyCapExceeded."""
        try:
            candidate = validate_entry(payload)
        except InvalidShape as e:
            logger.warning("Rejected entry: %s", "; ".join(e.errors))
            raise

        with self._locks.hold(candidate.date):
            existing = self.store.find_by_date(candidate.date)
            try:
                projected = check_daily_cap(candidate, existing, self.max_hours_per_day)
            except DailyCapExceeded as e:
                logger.warning("Rejected entry: %s", e.message)
                raise
            entry = self.store.insert(candidate)

        logger.info(
            "Created entry %s: %s %sh on %s (day total %sh)",
            entry.id, entry.project.value, entry.hours, entry.day.isoformat(), projected,
        )
        return entry

    def list_entries(self) -> list[TimeEntry]:
        """All entries, most recent day first, newest id first within a day."""
        entries = self.store.list_all()
        return sorted(entries, key=lambda e: (e.day, e.id), reverse=True)

    def history(self, year: Optional[int] = None, month: Any = None) -> History:
        return build_history(self.store.list_all(), parse_month_filter(year, month))

    def filter_options(self, year: Optional[int] = None) -> tuple[list[int], list[Month]]:
        """Years present in the data and, for `year`, the months present."""
        entries = self.store.list_all()
        years = available_years(entries)
        months = available_months(entries, year) if year is not None else []
        return years, months

    def day_total(self, day: date) -> Decimal:
        return daily_total(self.store.find_by_date(day), day)

    def remaining_hours(self, day: date) -> Decimal:
        return remaining_hours(self.store.find_by_date(day), day, self.max_hours_per_day)

    def delete_entry(self, entry_id: Any) -> None:
        entry_id = validate_entry_id(entry_id)
        self.store.delete_by_id(entry_id)
        logger.info("Deleted entry %s", entry_id)


def parse_month_filter(year: Any, month: Any) -> Optional[MonthFilter]:
    """Build a MonthFilter from loose inputs; both None means no filter."""
    if year is None and month is None:
        return None
    if year is None or month is None:
        raise InvalidShape("year and month must be given together")

    if isinstance(year, bool):
        raise InvalidShape(f"year: expected a number, got {year!r}")
    try:
        year = int(year)
    except (TypeError, ValueError):
        raise InvalidShape(f"year: expected a number, got {year!r}")

    if isinstance(month, Month):
        return MonthFilter(year=year, month=month)
    try:
        return MonthFilter(year=year, month=Month.from_number(int(month)))
    except (TypeError, ValueError):
        raise InvalidShape(f"month: expected 01-12, got {month!r}")
