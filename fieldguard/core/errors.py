"""
Custom exception hierarchy for FieldGuard.

Rule: every error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

from typing import Any, Sequence

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from fieldguard.core.logging import get_logger
from fieldguard.schemas.errors import ErrorKind, FieldError

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class FieldGuardException(Exception):
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


class ValidationConfigError(FieldGuardException, TypeError):
    """Malformed validate() arguments. Never a data validation failure."""
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_VALIDATION_REQUEST"

    def __init__(self, message: str, argument: str | None = None):
        super().__init__(
            message=message,
            details={"argument": argument} if argument else {},
        )


class FieldValidationError(FieldGuardException):
    """Raised by FieldValidator when configured to fail on a non-empty result."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"

    def __init__(self, errors: Sequence[FieldError], payload: Any = None):
        self.errors = list(errors)
        self.payload = payload
        super().__init__(
            message="Request validation failed.",
            details={"errors": [e.model_dump(mode="json") for e in self.errors]},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

_REQUIRED_TYPES = {"missing"}


def field_error_from_request_error(error: dict[str, Any]) -> FieldError:
    """Map one FastAPI/pydantic error dict onto the FieldError shape."""
    path = ".".join(str(loc) for loc in error["loc"] if loc != "body")
    if error["type"] in _REQUIRED_TYPES:
        return FieldError.required(path)
    return FieldError(
        path=path,
        message=error["msg"],
        kind=ErrorKind.type,
        value=error.get("input"),
    )


async def fieldguard_exception_handler(request: Request, exc: FieldGuardException) -> JSONResponse:
    logger.warning(
        "Request rejected",
        path=request.url.path,
        code=exc.code,
        status=exc.http_status,
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = [
        field_error_from_request_error(error).model_dump(mode="json")
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
