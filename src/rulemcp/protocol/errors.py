"""Wire error codes and the mapping from application errors to them."""

from __future__ import annotations

from rulemcp.errors import AppError, ErrorKind

CODE_VALIDATION = 4000
CODE_UNAUTHORIZED = 4001
CODE_FORBIDDEN = 4003
CODE_NOT_FOUND = 4040
CODE_CONFLICT = 4090
CODE_UNPROCESSABLE = 4220
CODE_INTERNAL = 5000

ERROR_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: CODE_VALIDATION,
    ErrorKind.UNAUTHORIZED: CODE_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: CODE_FORBIDDEN,
    ErrorKind.NOT_FOUND: CODE_NOT_FOUND,
    ErrorKind.CONFLICT: CODE_CONFLICT,
    ErrorKind.UNPROCESSABLE: CODE_UNPROCESSABLE,
    ErrorKind.INTERNAL: CODE_INTERNAL,
}

INTERNAL_MESSAGE = "Internal server error"


def map_error(exc: BaseException) -> tuple[int, str]:
    """Return the (code, message) pair an exception is reported with on the wire."""
    if isinstance(exc, AppError):
        return ERROR_CODES.get(exc.kind, CODE_INTERNAL), exc.message
    return CODE_INTERNAL, INTERNAL_MESSAGE
