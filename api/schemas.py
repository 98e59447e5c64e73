"""Pydantic request/response models for the Time Tracker API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from time_tracker.models import DayBucket, History, TimeEntry


class EntryCreateRequest(BaseModel):
    # Raw values; validate_entry owns the type and shape rules
    date: Any = None
    project: Any = None
    hours: Any = None
    description: Any = None


class EntryOut(BaseModel):
    id: int
    date: datetime
    project: str
    hours: float
    description: str
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: TimeEntry) -> "EntryOut":
        return cls(
            id=entry.id,
            date=entry.date,
            project=entry.project.value,
            hours=float(entry.hours),
            description=entry.description,
            created_at=entry.created_at,
        )


class DayGroup(BaseModel):
    date: str
    entries: list[EntryOut]
    total: float

    @classmethod
    def from_bucket(cls, bucket: DayBucket) -> "DayGroup":
        return cls(
            date=bucket.date.isoformat(),
            entries=[EntryOut.from_entry(e) for e in bucket.entries],
            total=float(bucket.total),
        )


class MonthSelection(BaseModel):
    year: int
    month: str


class HistoryResponse(BaseModel):
    filter: MonthSelection | None = None
    days: list[DayGroup]
    grand_total: float

    @classmethod
    def from_history(cls, history: History) -> "HistoryResponse":
        selection = None
        if history.month_filter is not None:
            selection = MonthSelection(
                year=history.month_filter.year,
                month=history.month_filter.month.value,
            )
        return cls(
            filter=selection,
            days=[DayGroup.from_bucket(b) for b in history.buckets],
            grand_total=float(history.grand_total),
        )


class FilterOptions(BaseModel):
    years: list[int]
    months: list[str]


class ProjectsResponse(BaseModel):
    projects: list[str]
    max_hours_per_day: float


class ErrorResponse(BaseModel):
    error_type: str
    message: str
    errors: list[str]
