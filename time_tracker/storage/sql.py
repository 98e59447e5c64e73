"""SQLAlchemy-backed entry store.

Dates are stored as naive UTC timestamps pinned to 00:00 of the day worked;
a day lookup is the half-open range [00:00, next 00:00).
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy import DateTime, Integer, String, Text, TypeDecorator, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from time_tracker.models import EntryCreate, EntryNotFound, Project, TimeEntry, day_start

logger = logging.getLogger(__name__)

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")
# largest id SQLite can hold in an INTEGER column
_MAX_ID = 2 ** 63 - 1


class Base(DeclarativeBase):
    pass


class DecimalText(TypeDecorator):
    """Decimal stored as its exact text form."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else Decimal(value)


class TimeEntryRow(Base):
    __tablename__ = "time_entries"
    # ids are never reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    project: Mapped[str] = mapped_column(String(64), nullable=False)
    hours: Mapped[Decimal] = mapped_column(DecimalText, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<TimeEntryRow(id={self.id}, date={self.date:%Y-%m-%d}, hours={self.hours})>"


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_entry(row: TimeEntryRow) -> TimeEntry:
    return TimeEntry(
        id=row.id,
        date=_from_naive_utc(row.date),
        project=Project(row.project),
        hours=row.hours,
        description=row.description,
        created_at=_from_naive_utc(row.created_at),
    )


class SqlEntryStore:
    """Entry store on any SQLAlchemy database URL."""

    def __init__(self, url: str, clock: Optional[Callable[[], datetime]] = None, echo: bool = False):
        if url in _MEMORY_URLS:
            # a single shared connection keeps the in-memory database alive
            self.engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif url.startswith("sqlite"):
            self.engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(url, echo=echo)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        Base.metadata.create_all(self.engine)
        logger.debug("Entry store ready at %s", self.engine.url)

    def list_all(self) -> list[TimeEntry]:
        with self._sessions() as session:
            rows = session.scalars(select(TimeEntryRow).order_by(TimeEntryRow.id)).all()
            return [_to_entry(r) for r in rows]

    def find_by_date(self, day: date) -> list[TimeEntry]:
        start = _to_naive_utc(day_start(day))
        end = start + timedelta(days=1)
        stmt = (
            select(TimeEntryRow)
            .where(TimeEntryRow.date >= start, TimeEntryRow.date < end)
            .order_by(TimeEntryRow.id)
        )
        with self._sessions() as session:
            return [_to_entry(r) for r in session.scalars(stmt).all()]

    def insert(self, candidate: EntryCreate) -> TimeEntry:
        row = TimeEntryRow(
            date=_to_naive_utc(day_start(candidate.date)),
            project=candidate.project.value,
            hours=candidate.hours,
            description=candidate.description,
            created_at=_to_naive_utc(self._clock()),
        )
        with self._sessions() as session:
            session.add(row)
            session.commit()
            return _to_entry(row)

    def delete_by_id(self, entry_id: int) -> None:
        if not 0 < entry_id <= _MAX_ID:
            raise EntryNotFound(entry_id)
        with self._sessions() as session:
            row = session.get(TimeEntryRow, entry_id)
            if row is None:
                raise EntryNotFound(entry_id)
            session.delete(row)
            session.commit()

    def close(self) -> None:
        self.engine.dispose()
