"""
Custom exception hierarchy for the Stretch Tracker API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

"Empty catalog" and "daily limit reached" are NOT errors: the selector
returns them as result variants (see services/selector.py).
"""
from __future__ import annotations

from typing import Any

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class StretchTrackerException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class StretchNotFoundError(StretchTrackerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "STRETCH_NOT_FOUND"

    def __init__(self, stretch_id: int):
        self.stretch_id = stretch_id
        super().__init__(
            message=f"Stretch {stretch_id} not found.",
            details={"stretch_id": stretch_id},
        )


class DuplicateNameError(StretchTrackerException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_NAME"

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message="A stretch with this name already exists.",
            details={"name": name},
        )


class ValidationFailedError(StretchTrackerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_FAILED"

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(
            message="Stretch data failed validation.",
            details={"errors": self.errors},
        )


class StoreError(StretchTrackerException):
    """A persistence backend failed (I/O, connectivity, corrupt file)."""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_FAILURE"

    def __init__(self, message: str, backend: str | None = None):
        super().__init__(
            message=message,
            details={"backend": backend} if backend else {},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def stretch_tracker_exception_handler(
    request: Request, exc: StretchTrackerException
) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
