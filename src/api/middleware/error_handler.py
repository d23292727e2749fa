"""
Global error handling middleware for the FastAPI application.

Catches VoiceBridgeError subclasses, request validation errors, and
unhandled exceptions, converting them into a consistent JSON envelope::

    {"error": "...", "code": "...", "details": "...", "timestamp": "..."}
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.exceptions import VoiceBridgeError
from src.core.models import ErrorResponse

logger = logging.getLogger(__name__)

# OpenAPI documentation for routes that can fail with the envelope
ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    500: {"model": ErrorResponse, "description": "AI provider failure"},
}


def _envelope(error: str, code: str, timestamp: str, details: str | None = None) -> dict:
    body = ErrorResponse(error=error, code=code, details=details, timestamp=timestamp)
    return body.model_dump(exclude_none=True)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``VoiceBridgeError``: maps domain errors to structured JSON responses.
    2. ``RequestValidationError``: malformed bodies (400, user input).
    3. ``Exception``: catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(VoiceBridgeError)
    async def voicebridge_error_handler(request: Request, exc: VoiceBridgeError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s (%s)",
                request.method,
                request.url.path,
                exc.detail,
                exc.details,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(exc.detail, exc.code, exc.timestamp, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies as user-input errors."""
        return JSONResponse(
            status_code=400,
            content=_envelope(
                "Invalid request body",
                "VALIDATION_ERROR",
                datetime.now(UTC).isoformat(),
                str(exc),
            ),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler that keeps stack traces from leaking to clients."""
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=500,
            content=_envelope(
                "Internal server error", "INTERNAL_ERROR", datetime.now(UTC).isoformat()
            ),
        )
