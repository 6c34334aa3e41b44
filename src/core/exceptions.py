"""Custom exceptions and error codes."""

from enum import StrEnum
from pathlib import Path
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """One or more task fields violate the validation rules."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="; ".join(self.errors) or "Validation failed",
            status_code=400,
            details={"errors": self.errors},
        )


class InvalidInputError(AppException):
    """Request input is unusable (e.g. blank suggestion text)."""

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_INPUT,
            message=message,
            status_code=400,
        )


class TaskNotFoundError(AppException):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message="Task not found",
            status_code=404,
            details={"task_id": task_id},
        )


class PersistenceError(AppException):
    """Reading or writing the task file failed.

    Raised by the storage layer only. The task service logs and swallows it,
    so it never reaches an HTTP client.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.PERSISTENCE_ERROR,
            message=message,
            status_code=500,
            details={"path": str(path)} if path is not None else None,
        )
