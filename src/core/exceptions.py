"""Application errors and the codes they are reported with."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Machine-readable ``error_code`` values in error bodies."""

    # 401
    UNAUTHORIZED = "UNAUTHORIZED"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"

    # 404
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # 400 / 422
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ADMIN_ALREADY_EXISTS = "ADMIN_ALREADY_EXISTS"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"

    # 429
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # 500
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base for errors rendered as ``{error, error_code, details}``.

    Subclasses set ``error_code``, ``status_code`` and a default message as
    class attributes; ``message`` is shown to the user unchanged.
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, details: Any | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """No bearer token, or the identity provider rejected it."""

    error_code = ErrorCode.UNAUTHORIZED
    status_code = 401
    default_message = "Authentication required"


class AdminRequiredError(AuthenticationError):
    """Caller could not be resolved to an admin profile."""

    error_code = ErrorCode.ADMIN_REQUIRED
    default_message = "Admin access required"


class AdminAlreadyExistsError(AppException):
    """An admin profile already exists somewhere in the store."""

    error_code = ErrorCode.ADMIN_ALREADY_EXISTS
    default_message = "Admin already exists. Only one admin per company is allowed."


class ProfileNotFoundError(AppException):
    error_code = ErrorCode.PROFILE_NOT_FOUND
    status_code = 404
    default_message = "Profile not found"

    def __init__(self, user_id: str) -> None:
        super().__init__(details={"user_id": user_id})


class UpstreamFailureError(AppException):
    """The identity provider refused an operation; its message is passed through."""

    error_code = ErrorCode.UPSTREAM_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
