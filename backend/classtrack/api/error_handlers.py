"""Error Handlers — global exception handlers for the ClassTrack API.

Invariants:
    - ClassTrackError -> its own to_response() with its http_status
      (409 conflicts render the fixed {message, code} payload)
    - Version-class and WARNING-severity errors (constraint clashes) logged at WARNING:
      they are routine under contention
    - RequestValidationError -> field-level error details
    - Exception (catch-all) -> never leaks internal details

Design Decisions:
    - One handler for every ClassTrackError: no per-route conflict branches
    - Extracted from main.py to keep the app module to wiring only
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from classtrack.core.conflicts import is_version_error
from classtrack.core.errors import ClassTrackError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_classtrack_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_classtrack_error_handler(app: FastAPI) -> None:

    @app.exception_handler(ClassTrackError)
    async def classtrack_error_handler(request: Request, exc: ClassTrackError):
        """Handle all ClassTrack domain/store errors."""
        routine = is_version_error(exc) or exc.severity == ErrorSeverity.WARNING
        level = logging.WARNING if routine else logging.ERROR
        logger.log(
            level,
            f"ClassTrackError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "entity": exc.context.entity,
                "record_id": exc.context.record_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
