"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from registrar.api.dependencies import (
    close_catalog,
    close_database,
    close_engine,
    init_catalog,
    init_database,
    init_engine,
)
from registrar.api.models import APIResponse
from registrar.api.routes import courses, schedules, students, subjects
from registrar.catalog import CatalogService
from registrar.config import Settings
from registrar.enrollment import AdmissionEngine
from registrar.exceptions import (
    AlreadyEnrolledError,
    CircularPrerequisiteError,
    InvalidScheduleError,
    NotFoundError,
    OperationCancelledError,
    PrerequisiteNotMetError,
    RecordExistsError,
    RegistrarError,
    ScheduleConflictError,
)
from registrar.logging import setup_logging
from registrar.store import RecordStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

# HTTP status per rejection family
_STATUS_BY_ERROR: list[tuple[type[RegistrarError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyEnrolledError, status.HTTP_409_CONFLICT),
    (PrerequisiteNotMetError, status.HTTP_400_BAD_REQUEST),
    (ScheduleConflictError, status.HTTP_409_CONFLICT),
    (CircularPrerequisiteError, status.HTTP_400_BAD_REQUEST),
    (RecordExistsError, status.HTTP_409_CONFLICT),
    (InvalidScheduleError, status.HTTP_400_BAD_REQUEST),
    (OperationCancelledError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def _error_response(status_code: int, exc: RegistrarError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](
            data=None,
            error=str(exc),
            error_kind=str(exc.kind),
            details=exc.to_detail(),
        ).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    if settings.log_dir or settings.log_level:
        setup_logging(settings)

    # Startup
    database = init_database(settings.db_path, busy_timeout=settings.busy_timeout)
    init_engine(AdmissionEngine(database))
    init_catalog(CatalogService(database))
    logger.info("Registrar API started (db=%s)", settings.db_path)

    yield
    # Shutdown
    close_catalog()
    close_engine()
    close_database()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Registrar API",
        description="REST API for Registrar - course enrollment and waitlists",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings if settings is not None else Settings.from_env()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    def register_handler(exc_class: type[RegistrarError], status_code: int) -> None:
        async def handler(_request: Request, exc: RegistrarError) -> JSONResponse:
            logger.warning("Request rejected (%s): %s", exc.kind, exc)
            return _error_response(status_code, exc)

        app.add_exception_handler(exc_class, handler)  # type: ignore[arg-type]

    for exc_class, status_code in _STATUS_BY_ERROR:
        register_handler(exc_class, status_code)

    @app.exception_handler(RecordStoreError)
    async def record_store_error_handler(
        _request: Request, exc: RecordStoreError
    ) -> JSONResponse:
        logger.error("Record store failure: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )

    # Include routers
    app.include_router(students.router, prefix="/api/v1")
    app.include_router(subjects.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(schedules.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
