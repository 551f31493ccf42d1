"""Application error kinds shared by the stores, the engine and the dispatcher."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    VALIDATION = "validation_error"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNPROCESSABLE = "unprocessable_entity"
    INTERNAL = "internal_error"


class AppError(Exception):
    """Base class for errors that carry a kind the dispatcher can map to a wire code."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, details: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    """Raised when required input is missing or malformed."""

    kind = ErrorKind.VALIDATION


class UnauthorizedError(AppError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(AppError):
    """Raised when a project, rule or method does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class UnprocessableError(AppError):
    kind = ErrorKind.UNPROCESSABLE


class InternalError(AppError):
    kind = ErrorKind.INTERNAL
