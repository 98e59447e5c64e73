"""Tests for daily cap enforcement and history grouping."""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from time_tracker.engine.aggregator import (
    available_months,
    available_years,
    build_history,
    check_daily_cap,
    daily_total,
    entry_day,
    filter_by_month,
    group_by_day,
    remaining_hours,
    safe_hours,
)
from time_tracker.models import (
    DailyCapExceeded,
    EntryCreate,
    Month,
    MonthFilter,
    Project,
    TimeEntry,
    day_start,
)

_BASE_CREATED = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _make_entry(entry_id: int, day: str = "2026-01-29", hours="8", created_at=None) -> TimeEntry:
    return TimeEntry(
        id=entry_id,
        date=day_start(date.fromisoformat(day)),
        project=Project.CLIENT_A,
        hours=Decimal(hours) if isinstance(hours, str) else hours,
        description=f"Entry {entry_id}",
        created_at=created_at or _BASE_CREATED + timedelta(minutes=entry_id),
    )


def _make_candidate(day: str = "2026-01-29", hours: str = "1") -> EntryCreate:
    return EntryCreate(
        date=date.fromisoformat(day),
        project=Project.VISO_INTERNAL,
        hours=Decimal(hours),
        description="New work",
    )


def _mixed_entries() -> list[TimeEntry]:
    return [
        _make_entry(1, "2026-01-15", "4"),
        _make_entry(2, "2026-02-03", "6"),
        _make_entry(3, "2026-01-15", "2.5"),
        _make_entry(4, "2026-02-10", "8"),
        _make_entry(5, "2025-12-31", "3"),
        _make_entry(6, "2026-02-03", "1.25"),
    ]


class TestEntryDay:
    def test_utc_datetime(self):
        assert entry_day(day_start(date(2026, 1, 29))) == date(2026, 1, 29)

    def test_offset_datetime_is_taken_in_utc(self):
        # 2026-01-30 01:00 at +02:00 is still 2026-01-29 in UTC
        value = datetime(2026, 1, 30, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert entry_day(value) == date(2026, 1, 29)

    def test_iso_string_and_date(self):
        assert entry_day("2026-01-29T00:00:00.000Z") == date(2026, 1, 29)
        assert entry_day(date(2026, 1, 29)) == date(2026, 1, 29)

    def test_entry(self):
        assert entry_day(_make_entry(1, "2026-02-01")) == date(2026, 2, 1)


class TestSafeHours:
    @pytest.mark.parametrize("value", [None, Decimal("NaN"), float("nan"), float("inf"), "abc", True])
    def test_bad_values_count_as_zero(self, value):
        assert safe_hours(value) == Decimal("0")

    def test_numbers(self):
        assert safe_hours(Decimal("2.5")) == Decimal("2.5")
        assert safe_hours(3) == Decimal("3")
        assert safe_hours(0.25) == Decimal("0.25")


class TestDailyCap:
    def test_scenario_over_cap_rejected(self):
        existing = [_make_entry(1, hours="10"), _make_entry(2, hours="14")]
        with pytest.raises(DailyCapExceeded, match="Max 24 hours per day exceeded for 2026-01-29"):
            check_daily_cap(_make_candidate(hours="1"), existing)

    def test_scenario_other_day_independent(self):
        existing = [_make_entry(1, hours="10"), _make_entry(2, hours="14")]
        assert check_daily_cap(_make_candidate("2026-01-30", "5"), existing) == Decimal("5")

    def test_exactly_at_cap_accepted(self):
        existing = [_make_entry(1, hours="10"), _make_entry(2, hours="13.75")]
        assert check_daily_cap(_make_candidate(hours="0.25"), existing) == Decimal("24")

    def test_just_over_cap_rejected(self):
        existing = [_make_entry(1, hours="23.9")]
        with pytest.raises(DailyCapExceeded) as exc_info:
            check_daily_cap(_make_candidate(hours="0.2"), existing)
        assert exc_info.value.existing == Decimal("23.9")
        assert exc_info.value.requested == Decimal("0.2")
        assert exc_info.value.day == date(2026, 1, 29)

    def test_decimal_sums_are_exact(self):
        existing = [_make_entry(i, hours="0.1") for i in range(1, 240)]
        # 239 * 0.1 = 23.9, plus 0.1 lands exactly on the cap
        assert check_daily_cap(_make_candidate(hours="0.1"), existing) == Decimal("24.0")

    def test_custom_limit(self):
        with pytest.raises(DailyCapExceeded, match="Max 8 hours"):
            check_daily_cap(_make_candidate(hours="9"), [], limit=Decimal("8"))

    def test_daily_total_matches_exact_day_only(self):
        entries = [
            _make_entry(1, "2026-01-28", "5"),
            _make_entry(2, "2026-01-29", "3"),
            _make_entry(3, "2026-01-30", "7"),
        ]
        assert daily_total(entries, date(2026, 1, 29)) == Decimal("3")

    def test_remaining_hours(self):
        entries = [_make_entry(1, hours="10"), _make_entry(2, hours="14")]
        assert remaining_hours(entries, date(2026, 1, 29)) == Decimal("0")
        assert remaining_hours(entries[:1], date(2026, 1, 29)) == Decimal("14")
        assert remaining_hours(entries, date(2026, 1, 30)) == Decimal("24")


class TestGroupByDay:
    def test_totals_sum_to_all_hours(self):
        entries = _mixed_entries()
        buckets = group_by_day(entries)
        assert sum(b.total for b in buckets) == sum(e.hours for e in entries)

    def test_bucket_purity(self):
        for bucket in group_by_day(_mixed_entries()):
            assert all(e.day == bucket.date for e in bucket.entries)

    def test_buckets_date_descending(self):
        dates = [b.date for b in group_by_day(_mixed_entries())]
        assert dates == sorted(dates, reverse=True)
        assert dates[0] == date(2026, 2, 10)
        assert dates[-1] == date(2025, 12, 31)

    def test_entries_created_at_descending(self):
        entries = [
            _make_entry(1, created_at=_BASE_CREATED + timedelta(hours=1)),
            _make_entry(2, created_at=_BASE_CREATED + timedelta(hours=3)),
            _make_entry(3, created_at=_BASE_CREATED + timedelta(hours=2)),
        ]
        (bucket,) = group_by_day(entries)
        assert [e.id for e in bucket.entries] == [2, 3, 1]

    def test_created_at_ties_keep_input_order(self):
        entries = [_make_entry(i, created_at=_BASE_CREATED) for i in (5, 2, 9)]
        (bucket,) = group_by_day(entries)
        assert [e.id for e in bucket.entries] == [5, 2, 9]

    def test_bucket_totals(self):
        buckets = {b.date: b.total for b in group_by_day(_mixed_entries())}
        assert buckets[date(2026, 1, 15)] == Decimal("6.5")
        assert buckets[date(2026, 2, 3)] == Decimal("7.25")

    def test_non_finite_and_missing_hours_count_as_zero(self):
        entries = [
            _make_entry(1, hours="4"),
            _make_entry(2, hours=Decimal("NaN")),
            _make_entry(3, hours=None),
            _make_entry(4, hours=float("inf")),
        ]
        (bucket,) = group_by_day(entries)
        assert bucket.total == Decimal("4")
        assert len(bucket.entries) == 4

    def test_empty(self):
        assert group_by_day([]) == []


class TestMonthFilter:
    def test_scenario_february_only(self):
        entries = _mixed_entries()
        history = build_history(entries, MonthFilter(year=2026, month=Month.FEBRUARY))
        assert [b.date for b in history.buckets] == [date(2026, 2, 10), date(2026, 2, 3)]
        assert history.grand_total == Decimal("15.25")

    def test_filter_is_strict_on_year(self):
        entries = [_make_entry(1, "2025-02-01"), _make_entry(2, "2026-02-01")]
        kept = filter_by_month(entries, MonthFilter(year=2026, month=Month.FEBRUARY))
        assert [e.id for e in kept] == [2]

    def test_no_filter_restores_everything(self):
        entries = _mixed_entries()
        filtered = build_history(entries, MonthFilter(year=2026, month=Month.JANUARY))
        everything = build_history(entries, None)
        assert filtered.entry_count == 2
        assert everything.entry_count == len(entries)
        assert everything.buckets == group_by_day(entries)

    def test_empty_month(self):
        history = build_history(_mixed_entries(), MonthFilter(year=2026, month=Month.MARCH))
        assert history.buckets == []
        assert history.grand_total == Decimal("0")

    def test_reads_are_idempotent(self):
        entries = tuple(_mixed_entries())
        selection = MonthFilter(year=2026, month=Month.FEBRUARY)
        assert build_history(entries, selection) == build_history(entries, selection)
        assert build_history(entries) == build_history(entries)


class TestAvailableOptions:
    def test_years_from_data(self):
        assert available_years(_mixed_entries()) == [2026, 2025]

    def test_months_from_data(self):
        assert available_months(_mixed_entries(), 2026) == [Month.FEBRUARY, Month.JANUARY]
        assert available_months(_mixed_entries(), 2025) == [Month.DECEMBER]

    def test_year_without_data(self):
        assert available_months(_mixed_entries(), 2024) == []

    def test_empty(self):
        assert available_years([]) == []
