from __future__ import annotations

"""Centralized, structured exception hierarchy for WeTask.

Every error raised by the auth issuer or the session client derives from
:class:`WetaskError`. Each exception carries a machine-readable ``code`` for
programmatic handling and a human-readable ``message`` for logging and user
feedback. Server-side errors map cleanly to HTTP status codes in
:mod:`wetask.core.handlers`; client-side errors (:class:`ApiError`,
:class:`SessionExpiredError`) are what callers of :mod:`wetask.client` see.
"""

from typing import Final, Optional

__all__: Final = [
    "WetaskError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "InvalidRefreshTokenError",
    "UserAlreadyExistsError",
    "EmailTakenError",
    "ValidationError",
    "PasswordPolicyError",
    "DatabaseError",
    "ApiError",
    "SessionExpiredError",
]


class WetaskError(Exception):
    """Base exception class for all custom errors in the WeTask services.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors (map to 401 Unauthorized)
# ---------------------------------------------------------------------------


class AuthenticationError(WetaskError):
    """Raised for general authentication failures.

    Base for the more specific authentication errors below. Maps to a
    ``401 Unauthorized`` HTTP status code.
    """

    def __init__(self, message: str = "Authentication failed", code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match a user.

    The message is deliberately the same for unknown emails and wrong
    passwords so login cannot be used to enumerate accounts.
    """

    def __init__(self, message: str = "Invalid credentials", code: str = "invalid_credentials"):
        super().__init__(message, code)


class InvalidTokenError(AuthenticationError):
    """Raised when an access token is missing, malformed, expired or orphaned."""

    def __init__(self, message: str = "Invalid token", code: str = "invalid_token"):
        super().__init__(message, code)


class InvalidRefreshTokenError(AuthenticationError):
    """Raised when a refresh token is unknown, already used or expired."""

    def __init__(
        self,
        message: str = "Invalid or expired refresh token",
        code: str = "invalid_refresh_token",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Conflict errors (map to 409 Conflict)
# ---------------------------------------------------------------------------


class UserAlreadyExistsError(WetaskError):
    """Raised when attempting to create a user that already exists."""

    def __init__(self, message: str = "User already exists", code: str = "user_already_exists"):
        super().__init__(message, code)


class EmailTakenError(UserAlreadyExistsError):
    """Raised when registering with an email that belongs to another account."""

    def __init__(
        self,
        message: str = "User with this email already exists",
        code: str = "email_taken",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Validation errors (map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(WetaskError):
    """Raised for domain-level data validation failures."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class PasswordPolicyError(ValidationError):
    """Raised when a password does not meet the configured policy."""

    def __init__(self, message: str, code: str = "password_policy_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Persistence errors (map to 500 Internal Server Error)
# ---------------------------------------------------------------------------


class DatabaseError(WetaskError):
    """Wraps low-level database driver errors raised inside repositories."""

    def __init__(self, message: str = "A database error occurred.", code: str = "database_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Client-side errors
# ---------------------------------------------------------------------------


class ApiError(WetaskError):
    """Raised by the session client when the API answers with a non-2xx status.

    Attributes:
        status_code (int): HTTP status of the failed response.
    """

    def __init__(self, status_code: int, message: Optional[str] = None, code: str = "api_error"):
        self.status_code = status_code
        super().__init__(message or "Request failed", code)


class SessionExpiredError(AuthenticationError):
    """Raised to every waiting caller when the session cannot be refreshed.

    The token store has been cleared by the time this is raised; the caller
    is expected to send the user back to sign-in.
    """

    def __init__(
        self,
        message: str = "Session expired. Please sign in again.",
        code: str = "session_expired",
    ):
        super().__init__(message, code)
