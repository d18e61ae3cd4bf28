from __future__ import annotations

"""Centralized, structured exception hierarchy for the portal.

Each exception carries a machine-readable ``code`` and a human-readable
``message``. Messages raised from the proxy layer are i18n keys that the
exception handlers translate for the requesting client; messages that come
straight from the backend (``detail``/``message`` fields) are forwarded as-is.

The hierarchy maps cleanly onto the proxy error envelope:

- ``AuthenticationError`` and subclasses -> ``401``
- ``LoginError`` and subclasses -> their own status, login envelope
- ``ValidationError`` -> ``400``
- ``BackendError`` -> the backend's own status
- ``BackendUnavailableError`` -> ``500``
"""

from typing import Final, Optional

__all__: Final = [
    "PortalError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "SessionExpiredError",
    "LoginError",
    "InvalidCredentialsError",
    "AccountLockedError",
    "LoginRateLimitedError",
    "ValidationError",
    "BackendError",
    "BackendUnavailableError",
    "SessionRequestsCancelledError",
    "backend_message",
]


class PortalError(Exception):
    """Base exception class for all custom errors in the portal.

    Attributes:
        message (str): A human-readable error message or an i18n key.
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
# Auth-related errors (401)
# ---------------------------------------------------------------------------


class AuthenticationError(PortalError):
    """Raised for general authentication failures. Maps to ``401 Unauthorized``."""

    def __init__(self, message: str = "not_authenticated", code: str = "authentication_error"):
        super().__init__(message, code)


class NotAuthenticatedError(AuthenticationError):
    """No usable access or refresh token exists.

    Raised before any backend call is attempted.
    """

    def __init__(self, message: str = "not_authenticated", code: str = "not_authenticated"):
        super().__init__(message, code)


class SessionExpiredError(AuthenticationError):
    """The refresh attempt failed and the token pair has been discarded.

    Carries a distinct message so that clients can start the interactive
    re-authentication flow instead of treating it as a plain 401.
    """

    def __init__(self, message: str = "session_expired", code: str = "session_expired"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Login errors
# ---------------------------------------------------------------------------


class LoginError(PortalError):
    """Base class for failed login attempts.

    Login failures are rendered as ``{"success": false, "error": ...}`` rather
    than the plain proxy error envelope.

    Attributes:
        status_code (int): HTTP status returned to the browser.
        translatable (bool): ``False`` when ``message`` came from the backend.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str = "login_failed",
        code: str = "login_failed",
        status_code: Optional[int] = None,
        translatable: bool = True,
    ):
        if status_code is not None:
            self.status_code = status_code
        self.translatable = translatable
        super().__init__(message, code)


class InvalidCredentialsError(LoginError):
    """Raised when the backend rejects login credentials. Maps to ``401``."""

    status_code = 401

    def __init__(self, message: str = "invalid_email_or_password", code: str = "invalid_credentials"):
        super().__init__(message, code)


class AccountLockedError(LoginError):
    """Raised when the backend reports the account as locked. Maps to ``403``."""

    status_code = 403

    def __init__(self, message: str = "account_locked", code: str = "account_locked"):
        super().__init__(message, code)


class LoginRateLimitedError(LoginError):
    """Raised when the backend throttles login attempts. Maps to ``429``.

    Attributes:
        retry_after (int): Seconds the client should wait, from ``Retry-After``.
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        message: str = "too_many_login_attempts",
        code: str = "rate_limit_exceeded",
    ):
        self.retry_after = retry_after
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Validation errors (400)
# ---------------------------------------------------------------------------


class ValidationError(PortalError):
    """Raised when a proxy route rejects its own input before calling the backend."""

    def __init__(self, message: str = "invalid_request", code: str = "validation_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Backend errors
# ---------------------------------------------------------------------------


class BackendError(PortalError):
    """The backend answered with a non-success status.

    Attributes:
        status_code (int): The backend's HTTP status, forwarded to the caller.
        translatable (bool): ``False`` when ``message`` came from the backend
            body and must not be looked up in the catalog.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str = "backend_error",
        translatable: bool = False,
    ):
        self.status_code = status_code
        self.translatable = translatable
        super().__init__(message, code)


class BackendUnavailableError(PortalError):
    """The backend could not be reached or returned an unreadable body.

    Network and parse failures are not retried. Maps to ``500``.
    """

    def __init__(self, message: str = "unexpected_error", code: str = "backend_unavailable"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Client-side errors
# ---------------------------------------------------------------------------


class SessionRequestsCancelledError(PortalError):
    """Settles requests that were queued for replay when the user cancels re-authentication."""

    def __init__(
        self,
        message: str = "Session expired - requests cancelled",
        code: str = "session_requests_cancelled",
    ):
        super().__init__(message, code)


def backend_message(payload: object, fallback: Optional[str] = None) -> Optional[str]:
    """Extracts the human-readable error from a backend body.

    The backend reports errors as ``{"detail": ...}`` and occasionally as
    ``{"message": ...}``; only string values are used.
    """
    if isinstance(payload, dict):
        for field in ("detail", "message"):
            value = payload.get(field)
            if isinstance(value, str) and value:
                return value
    return fallback
