"""Translate errors into JSON responses.

Every error body is ``{"kind": ..., "message": ...}``. Storage faults are
logged with full context and answered with a generic message, as is any
other unexpected exception.
"""

from __future__ import annotations

import sqlite3

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from studytrack.core.errors import StoreFailureError, StudyTrackError, ValidationError

logger = structlog.get_logger(__name__)


def _error_response(error: StudyTrackError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"kind": error.kind, "message": error.message},
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def handle_studytrack_error(request: Request, exc: StudyTrackError) -> JSONResponse:
    if isinstance(exc, StoreFailureError):
        logger.error("store.failure", path=request.url.path, method=request.method)
    return _error_response(exc)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(ValidationError(_describe_validation_errors(exc)))


async def handle_store_error(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error(
        "store.failure",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return _error_response(StoreFailureError())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "api.unhandled_error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return _error_response(StoreFailureError())


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on an app."""
    app.add_exception_handler(StudyTrackError, handle_studytrack_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(sqlite3.Error, handle_store_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


# Documented on routes that can fail
ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"description": "Invalid request"},
    status.HTTP_401_UNAUTHORIZED: {"description": "Missing or invalid identity"},
    status.HTTP_404_NOT_FOUND: {"description": "Entity not found"},
}
