"""Entry store collaborators."""

from __future__ import annotations

from datetime import date
from typing import Protocol

from time_tracker.models import EntryCreate, TimeEntry
from time_tracker.storage.memory import InMemoryEntryStore
from time_tracker.storage.sql import SqlEntryStore

MEMORY_URL = "memory://"


class EntryStore(Protocol):
    def list_all(self) -> list[TimeEntry]: ...

    def find_by_date(self, day: date) -> list[TimeEntry]: ...

    def insert(self, candidate: EntryCreate) -> TimeEntry: ...

    def delete_by_id(self, entry_id: int) -> None: ...


def create_store(url: str) -> EntryStore:
    """Build a store from a database URL; `memory://` gives a throwaway store."""
    if url == MEMORY_URL:
        return InMemoryEntryStore()
    return SqlEntryStore(url)


__all__ = ["EntryStore", "InMemoryEntryStore", "SqlEntryStore", "create_store", "MEMORY_URL"]
