"""API routes for the Time Tracker."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from time_tracker.models import MAX_HOURS_PER_DAY, Project
from time_tracker.service import EntryService

from api.schemas import (
    EntryCreateRequest,
    EntryOut,
    ErrorResponse,
    FilterOptions,
    HistoryResponse,
    ProjectsResponse,
)

router = APIRouter(prefix="/api/v1")

_ERRORS = {
    400: {"model": ErrorResponse},
}


def get_service(request: Request) -> EntryService:
    """The EntryService attached to the running application."""
    return request.app.state.get_service()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/projects", response_model=ProjectsResponse)
async def projects():
    return ProjectsResponse(
        projects=Project.labels(),
        max_hours_per_day=float(MAX_HOURS_PER_DAY),
    )


@router.get("/entries", response_model=list[EntryOut])
def list_entries(service: EntryService = Depends(get_service)):
    """All entries, most recent day first."""
    return [EntryOut.from_entry(e) for e in service.list_entries()]


@router.get("/entries/history", response_model=HistoryResponse, responses=_ERRORS)
def history(
    year: Optional[int] = Query(None, description="Year to filter by (with month)"),
    month: Optional[str] = Query(None, description="Two-digit month to filter by (with year)"),
    service: EntryService = Depends(get_service),
):
    """Entries grouped by day with per-day totals and a grand total."""
    return HistoryResponse.from_history(service.history(year, month))


@router.get("/entries/filters", response_model=FilterOptions)
def filters(
    year: Optional[int] = Query(None, description="Year to list months for"),
    service: EntryService = Depends(get_service),
):
    """Years and months that actually have entries."""
    years, months = service.filter_options(year)
    return FilterOptions(years=years, months=[m.value for m in months])


@router.post(
    "/entries",
    response_model=EntryOut,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
def create_entry(body: EntryCreateRequest, service: EntryService = Depends(get_service)):
    """Log a new entry; rejected when the day's total would exceed the cap."""
    entry = service.create_entry(body.model_dump())
    return EntryOut.from_entry(entry)


@router.delete(
    "/entries/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_ERRORS, 404: {"model": ErrorResponse}},
)
def delete_entry(entry_id: str, service: EntryService = Depends(get_service)):
    service.delete_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
