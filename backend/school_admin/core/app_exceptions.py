"""Application-specific exceptions for consistent error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Application error with standardized error code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
    ):
        """Initialize application error."""
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details,
            },
        )
        self.code = code
        self.message = message
        self.details = details


def not_found(code: str, message: str) -> AppError:
    """Build a 404 application error."""
    return AppError(status_code=status.HTTP_404_NOT_FOUND, code=code, message=message)


def conflict(code: str, message: str, details: dict[str, Any] | None = None) -> AppError:
    """Build a 409 application error."""
    return AppError(status_code=status.HTTP_409_CONFLICT, code=code, message=message, details=details)


def unprocessable(code: str, message: str, details: dict[str, Any] | list[Any] | None = None) -> AppError:
    """Build a 422 application error."""
    return AppError(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, code=code, message=message, details=details
    )


def forbidden(message: str = "You do not have permission to perform this action") -> AppError:
    """Build a 403 application error."""
    return AppError(status_code=status.HTTP_403_FORBIDDEN, code="FORBIDDEN", message=message)


def upstream_error(status_code: int, message: str) -> AppError:
    """Relay a school backend failure; client errors keep their status, the rest become 502."""
    if not 400 <= status_code < 500:
        status_code = status.HTTP_502_BAD_GATEWAY
    return AppError(status_code=status_code, code="UPSTREAM_ERROR", message=message)
