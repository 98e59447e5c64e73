"""In-memory entry store."""

from __future__ import annotations

import itertools
import threading
from datetime import date, datetime, timezone
from typing import Callable, Optional

from time_tracker.models import EntryCreate, EntryNotFound, TimeEntry, day_start


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryEntryStore:
    """List-backed store; ids start at 1 and are never reused."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utcnow
        self._entries: list[TimeEntry] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def list_all(self) -> list[TimeEntry]:
        with self._lock:
            return list(self._entries)

    def find_by_date(self, day: date) -> list[TimeEntry]:
        with self._lock:
            return [e for e in self._entries if e.day == day]

    def insert(self, candidate: EntryCreate) -> TimeEntry:
        with self._lock:
            entry = TimeEntry(
                id=next(self._ids),
                date=day_start(candidate.date),
                project=candidate.project,
                hours=candidate.hours,
                description=candidate.description,
                created_at=self._clock(),
            )
            self._entries.append(entry)
            return entry

    def delete_by_id(self, entry_id: int) -> None:
        with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    del self._entries[i]
                    return
        raise EntryNotFound(entry_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
