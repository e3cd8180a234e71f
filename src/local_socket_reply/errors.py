"""Error categories and exceptions raised by the local socket client."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Failure kinds a reply can finish with."""

    PROTOCOL_FAILURE = "protocol_failure"
    OPERATION_CANCELED = "operation_canceled"
    INVALID_OPERATION = "invalid_operation"
    AUTHENTICATION_REQUIRED = "authentication_required"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    UNKNOWN_SERVER_ERROR = "unknown_server_error"
    UNKNOWN_CONTENT_ERROR = "unknown_content_error"


class LocalSocketError(Exception):
    """Base error for all client failures."""

    category: ErrorCategory | None = None

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class ConnectionError(LocalSocketError):
    """Raised when the daemon socket cannot be reached."""


class ProtocolError(LocalSocketError):
    """Raised when the daemon answers with something that is not HTTP."""

    category = ErrorCategory.PROTOCOL_FAILURE


class OperationCanceledError(LocalSocketError):
    """Raised when a request was aborted before the reply finished."""

    category = ErrorCategory.OPERATION_CANCELED


class InvalidOperationError(LocalSocketError):
    """Raised when the daemon rejects the request as a bad request."""

    category = ErrorCategory.INVALID_OPERATION


class AuthenticationError(LocalSocketError):
    """Raised when the daemon requires authentication."""

    category = ErrorCategory.AUTHENTICATION_REQUIRED


class AccessDeniedError(LocalSocketError):
    """Raised when the daemon denies access to a resource."""

    category = ErrorCategory.ACCESS_DENIED


class NotFoundError(LocalSocketError):
    """Raised when the target resource does not exist."""

    category = ErrorCategory.NOT_FOUND


class ConflictError(LocalSocketError):
    """Raised when the request conflicts with the state of a resource."""

    category = ErrorCategory.CONFLICT


class ServerError(LocalSocketError):
    """Raised when the daemon reports an internal server error."""

    category = ErrorCategory.INTERNAL_SERVER_ERROR


class UnknownServerError(ServerError):
    """Raised for 5xx statuses above 500."""

    category = ErrorCategory.UNKNOWN_SERVER_ERROR


class ContentError(LocalSocketError):
    """Raised for 4xx statuses without a dedicated category."""

    category = ErrorCategory.UNKNOWN_CONTENT_ERROR


_EXCEPTIONS: dict[ErrorCategory, type[LocalSocketError]] = {
    ErrorCategory.PROTOCOL_FAILURE: ProtocolError,
    ErrorCategory.OPERATION_CANCELED: OperationCanceledError,
    ErrorCategory.INVALID_OPERATION: InvalidOperationError,
    ErrorCategory.AUTHENTICATION_REQUIRED: AuthenticationError,
    ErrorCategory.ACCESS_DENIED: AccessDeniedError,
    ErrorCategory.NOT_FOUND: NotFoundError,
    ErrorCategory.CONFLICT: ConflictError,
    ErrorCategory.INTERNAL_SERVER_ERROR: ServerError,
    ErrorCategory.UNKNOWN_SERVER_ERROR: UnknownServerError,
    ErrorCategory.UNKNOWN_CONTENT_ERROR: ContentError,
}


def exception_for(category: ErrorCategory) -> type[LocalSocketError]:
    return _EXCEPTIONS[category]


__all__ = [
    "AccessDeniedError",
    "AuthenticationError",
    "ConflictError",
    "ConnectionError",
    "ContentError",
    "ErrorCategory",
    "InvalidOperationError",
    "LocalSocketError",
    "NotFoundError",
    "OperationCanceledError",
    "ProtocolError",
    "ServerError",
    "UnknownServerError",
    "exception_for",
]
