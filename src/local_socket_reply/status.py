"""HTTP status code to error category mapping."""

from __future__ import annotations

from .errors import ErrorCategory

# Only the statuses of the LXD REST error convention get their own category:
# https://documentation.ubuntu.com/lxd/en/latest/rest-api/#error
_STATUS_CATEGORIES: dict[int, ErrorCategory] = {
    400: ErrorCategory.INVALID_OPERATION,
    401: ErrorCategory.AUTHENTICATION_REQUIRED,
    403: ErrorCategory.ACCESS_DENIED,
    404: ErrorCategory.NOT_FOUND,
    409: ErrorCategory.CONFLICT,
    500: ErrorCategory.INTERNAL_SERVER_ERROR,
}


def error_from_http_status(status: int) -> ErrorCategory:
    category = _STATUS_CATEGORIES.get(status)
    if category is not None:
        return category
    if status > 500:
        return ErrorCategory.UNKNOWN_SERVER_ERROR
    return ErrorCategory.UNKNOWN_CONTENT_ERROR


__all__ = ["error_from_http_status"]
