"""Per-date mutual exclusion for the check-then-insert sequence."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Iterator


class DateLocks:
    """One lock per calendar day, dropped once no thread holds or waits on it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[date, threading.Lock] = {}
        self._users: dict[date, int] = {}

    @contextmanager
    def hold(self, day: date) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(day, threading.Lock())
            self._users[day] = self._users.get(day, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[day] -= 1
                if self._users[day] == 0:
                    del self._users[day]
                    del self._locks[day]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
