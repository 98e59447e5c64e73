"""Tests for the in-memory and SQL entry stores."""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from time_tracker.models import EntryCreate, EntryNotFound, Project
from time_tracker.storage import (
    MEMORY_URL,
    InMemoryEntryStore,
    SqlEntryStore,
    create_store,
)


class _Clock:
    def __init__(self):
        self.now = datetime(2026, 1, 29, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


def _make_candidate(day: str = "2026-01-29", hours: str = "8", project=Project.CLIENT_A) -> EntryCreate:
    return EntryCreate(
        date=date.fromisoformat(day),
        project=project,
        hours=Decimal(hours),
        description="Feature work",
    )


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        yield InMemoryEntryStore(clock=_Clock())
    else:
        sql_store = SqlEntryStore("sqlite://", clock=_Clock())
        yield sql_store
        sql_store.close()


class TestEntryStore:
    def test_insert_assigns_id_and_created_at(self, store):
        first = store.insert(_make_candidate())
        second = store.insert(_make_candidate(hours="2"))
        assert first.id == 1
        assert second.id == 2
        assert first.created_at == datetime(2026, 1, 29, 9, 1, tzinfo=timezone.utc)
        assert second.created_at > first.created_at

    def test_date_pinned_to_utc_midnight(self, store):
        entry = store.insert(_make_candidate("2026-01-29"))
        assert entry.date == datetime(2026, 1, 29, tzinfo=timezone.utc)
        assert entry.day == date(2026, 1, 29)

    def test_round_trips_fields(self, store):
        store.insert(_make_candidate(hours="7.25", project=Project.PERSONAL_DEVELOPMENT))
        (entry,) = store.list_all()
        assert entry.project is Project.PERSONAL_DEVELOPMENT
        assert entry.hours == Decimal("7.25")
        assert entry.description == "Feature work"

    @pytest.mark.parametrize("hours", ["1.00000000000000000001", "0.1", "7.333333333333333333333"])
    def test_hours_kept_exact(self, store, hours):
        inserted = store.insert(_make_candidate(hours=hours))
        (stored,) = store.list_all()
        assert inserted.hours == Decimal(hours)
        assert stored.hours == Decimal(hours)
        assert str(stored.hours) == hours

    def test_find_by_date_is_exact_day(self, store):
        store.insert(_make_candidate("2026-01-28", "1"))
        store.insert(_make_candidate("2026-01-29", "2"))
        store.insert(_make_candidate("2026-01-29", "3"))
        store.insert(_make_candidate("2026-01-30", "4"))
        found = store.find_by_date(date(2026, 1, 29))
        assert sorted(e.hours for e in found) == [Decimal("2"), Decimal("3")]

    def test_find_by_date_empty(self, store):
        assert store.find_by_date(date(2026, 1, 29)) == []

    def test_delete(self, store):
        kept = store.insert(_make_candidate(hours="10"))
        removed = store.insert(_make_candidate(hours="14"))
        store.delete_by_id(removed.id)
        assert [e.id for e in store.list_all()] == [kept.id]

    def test_delete_missing_raises(self, store):
        with pytest.raises(EntryNotFound):
            store.delete_by_id(99)

    def test_delete_id_beyond_integer_range(self, store):
        store.insert(_make_candidate())
        with pytest.raises(EntryNotFound):
            store.delete_by_id(10 ** 30)
        assert len(store.list_all()) == 1

    def test_ids_not_reused(self, store):
        first = store.insert(_make_candidate())
        store.delete_by_id(first.id)
        second = store.insert(_make_candidate())
        assert second.id != first.id


class TestCreateStore:
    def test_memory(self):
        assert isinstance(create_store(MEMORY_URL), InMemoryEntryStore)

    def test_sqlite_file(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'entries.db'}"
        store = create_store(url)
        assert isinstance(store, SqlEntryStore)
        store.insert(_make_candidate())
        store.close()

        reopened = SqlEntryStore(url)
        assert len(reopened.list_all()) == 1
        reopened.close()
