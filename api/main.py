"""FastAPI application — Time Tracker API."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from time_tracker import __version__
from time_tracker.config import Settings, configure_logging, load_settings
from time_tracker.models import (
    DailyCapExceeded,
    EntryNotFound,
    InvalidShape,
    TimeTrackerError,
)
from time_tracker.service import EntryService
from time_tracker.storage import create_store

from api.routes import router

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    InvalidShape: status.HTTP_400_BAD_REQUEST,
    DailyCapExceeded: status.HTTP_400_BAD_REQUEST,
    EntryNotFound: status.HTTP_404_NOT_FOUND,
}


def _error_body(error_type: str, message: str, errors: list[str]) -> dict:
    return {"error_type": error_type, "message": message, "errors": errors}


async def _time_tracker_error(request: Request, exc: TimeTrackerError) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST),
        content=_error_body(exc.error_type, exc.message, exc.errors),
    )


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    logger.warning("Rejected request %s %s: %s", request.method, request.url.path, "; ".join(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(InvalidShape.error_type, "Validation error", errors),
    )


def create_app(service: Optional[EntryService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API.

    Without an explicit service, one is created on first use from
    TIME_TRACKER_DATABASE_URL.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Time Tracker API",
        description="Daily work-hours log with a per-day hours cap.",
        version=__version__,
    )

    lock = threading.Lock()

    def get_service() -> EntryService:
        nonlocal service
        with lock:
            if service is None:
                logger.info("Opening entry store at %s", settings.database_url)
                service = EntryService(create_store(settings.database_url))
            return service

    app.state.get_service = get_service

    # CORS — allow frontend origins
    # Set ALLOWED_ORIGINS="*" to allow any origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=not settings.allow_all_origins,  # credentials not allowed with wildcard
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )

    app.add_exception_handler(TimeTrackerError, _time_tracker_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.include_router(router)

    @app.get("/")
    async def root():
        return {
            "name": "Time Tracker API",
            "version": __version__,
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


app = create_app()
