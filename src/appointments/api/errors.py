"""Map domain errors onto HTTP responses.

Business-rule refusals become 4xx responses carrying the human-readable
reason; retryable store errors become 409/503 with ``retryable: true``.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from appointments.domain.errors import (
    AppointmentError,
    ConcurrentModificationError,
    DuplicateActiveError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    StoreUnavailableError,
)

logger = structlog.get_logger()

# Anything not listed falls back to 400.
STATUS_CODES: dict[type[AppointmentError], int] = {
    NotFoundError: 404,
    ForbiddenError: 403,
    DuplicateActiveError: 409,
    InvalidTransitionError: 409,
    ConcurrentModificationError: 409,
    StoreUnavailableError: 503,
}


def status_code_for(exc: AppointmentError) -> int:
    """Return the HTTP status code for a domain error."""
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 400


async def appointment_error_handler(request: Request, exc: AppointmentError) -> JSONResponse:
    """Render an :class:`AppointmentError` as ``{"error", "message", "retryable"}``."""
    code = status_code_for(exc)
    if code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.code)
    return JSONResponse(
        status_code=code,
        content={"error": exc.code, "message": str(exc), "retryable": exc.retryable},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler on *app*."""
    app.add_exception_handler(AppointmentError, appointment_error_handler)
