from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into the proxy error envelope ``{"error": message}``. Login
failures use ``{"success": false, "error": message}`` instead.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AuthenticationError,
    BackendError,
    BackendUnavailableError,
    LoginError,
    LoginRateLimitedError,
    PortalError,
    ValidationError,
)
from src.utils.i18n import get_request_language, get_translated_message

__all__ = [
    "authentication_error_handler",
    "login_error_handler",
    "validation_error_handler",
    "request_validation_error_handler",
    "backend_error_handler",
    "backend_unavailable_error_handler",
    "portal_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _language(request: Request) -> str:
    return getattr(request.state, "language", None) or get_request_language(request)


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def _error(request: Request, status_code: int, key: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": get_translated_message(key, _language(request))},
    )


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`.

    Covers both a missing session (``Not authenticated``) and an expired one
    whose refresh failed (``Session expired. Please log in again.``); browser
    clients tell them apart by the message.

    Args:
        request: The incoming `Request` object.
        exc: The `AuthenticationError` instance.

    Returns:
        A `JSONResponse` with a 401 status code and error message.
    """
    logger.warning(
        "authentication_failure",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return _error(request, status.HTTP_401_UNAUTHORIZED, exc.message)


async def login_error_handler(request: Request, exc: LoginError) -> JSONResponse:
    """Handles `LoginError` and its subclasses with the login envelope.

    Rate-limited attempts also carry ``retryAfter`` in the body and a
    ``Retry-After`` header.
    """
    message = exc.message
    if exc.translatable:
        message = get_translated_message(message, _language(request))

    content = {"success": False, "error": message}
    headers = None
    if isinstance(exc, LoginRateLimitedError):
        content["retryAfter"] = exc.retry_after
        headers = {"Retry-After": str(exc.retry_after)}

    logger.warning(
        "login_rejected",
        error=exc.code,
        status=exc.status_code,
        client_ip=_client_ip(request),
    )
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError`, returning a `400 Bad Request`.

    Raised by proxy routes that reject their own input before any backend
    call is made.
    """
    return _error(request, status.HTTP_400_BAD_REQUEST, exc.message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handles FastAPI's `RequestValidationError` with the proxy envelope.

    Unparseable bodies and mistyped path parameters become
    ``400 {"error": ...}`` instead of FastAPI's default ``422`` detail list.
    """
    logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
    return _error(request, status.HTTP_400_BAD_REQUEST, "invalid_request")


async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    """Handles `BackendError`, forwarding the backend's status.

    The message is either the backend's own ``detail``/``message`` (sent
    verbatim) or a route-specific catalog key.
    """
    message = exc.message
    if exc.translatable:
        message = get_translated_message(message, _language(request))
    return JSONResponse(status_code=exc.status_code, content={"error": message})


async def backend_unavailable_error_handler(
    request: Request, exc: BackendUnavailableError
) -> JSONResponse:
    """Handles `BackendUnavailableError`, returning a `500`.

    Network and parse failures are reported with a generic message; the cause
    has already been logged by the backend client.
    """
    return _error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Handles the base `PortalError`, returning a `500 Internal Server Error`.

    This serves as a fallback for any custom application errors that do not
    have a more specific handler.
    """
    logger.error(
        "unhandled_application_error",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return _error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "unexpected_error")


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Handlers are resolved along the exception's MRO, so the `PortalError`
    fallback only sees errors without a more specific handler.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(LoginError, login_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(BackendUnavailableError, backend_unavailable_error_handler)
    app.add_exception_handler(PortalError, portal_error_handler)
