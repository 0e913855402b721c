"""Error handling and consistent error response format."""

import uuid
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from school_admin.core.app_exceptions import AppError
from school_admin.core.logging import get_logger

logger = get_logger(__name__)


class ErrorResponse(BaseModel):
    """Error response envelope.

    Format: {error_code, message, details, request_id}
    The console UI switches on ``error_code``; ``message`` is shown as-is.
    """

    error_code: str
    message: str
    details: Any | None = None
    request_id: str | None = None


def get_request_id(request: Request) -> str:
    """Get request ID from request state or generate new one."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return str(uuid.uuid4())


def _envelope(status_code: int, request: Request, code: str, message: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=code,
            message=message,
            details=details,
            request_id=get_request_id(request),
        ).model_dump(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors (422)."""
    details = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "issue": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]
    return _envelope(
        status.HTTP_422_UNPROCESSABLE_ENTITY, request, "VALIDATION_ERROR", "Invalid request data", details
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions.

    ``AppError`` carries its own code. Plain ``HTTPException`` may pass a
    ``{code, message, details}`` dict as detail; anything else is ``HTTP_ERROR``.
    """
    if isinstance(exc, AppError):
        return _envelope(exc.status_code, request, exc.code, exc.message, exc.details)

    if isinstance(exc.detail, dict):
        return _envelope(
            exc.status_code,
            request,
            exc.detail.get("code", "HTTP_ERROR"),
            exc.detail.get("message", "An error occurred"),
            exc.detail.get("details"),
        )
    return _envelope(exc.status_code, request, "HTTP_ERROR", str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions (500)."""
    logger.error(
        "Unhandled exception",
        extra={"request_id": get_request_id(request), "error": str(exc)},
        exc_info=exc,
    )

    # Internal details stay hidden in production
    if request.app.state.settings.ENV == "prod":
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, request, "INTERNAL_ERROR", "An internal server error occurred"
        )
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        request,
        "INTERNAL_ERROR",
        str(exc),
        {"type": type(exc).__name__},
    )
