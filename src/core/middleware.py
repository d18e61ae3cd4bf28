"""Middleware configuration for the FastAPI application.

This module handles the configuration and registration of all middleware
components including CORS, language handling and the token cookie boundary.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.core.config.settings import settings
from src.infrastructure.token_store.cookie_store import CookieTokenStore
from src.utils.i18n import get_request_language


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    # CORS middleware configuration; credentials are required for the token cookies
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Token cookie middleware
    app.middleware("http")(token_cookie_middleware)

    # Language middleware
    app.middleware("http")(set_language_middleware)


async def set_language_middleware(request: Request, call_next):
    """Middleware for handling language preferences in requests.

    This middleware:
    1. Extracts language preference from query parameters or headers
    2. Sets the language for the current request
    3. Adds language information to response headers

    Args:
        request (Request): The incoming request
        call_next: The next middleware or route handler

    Returns:
        Response: The response with language headers
    """
    lang = get_request_language(request)
    request.state.language = lang
    response = await call_next(request)
    response.headers["Content-Language"] = lang
    return response


async def token_cookie_middleware(request: Request, call_next):
    """Binds a cookie token store to the request and persists its changes.

    The store is created from the incoming cookies before the route runs.
    Whatever the route or an exception handler returns, the token writes and
    deletions recorded on the store are applied to that response, so a failed
    refresh clears both cookies even on a ``401``.
    """
    token_store = CookieTokenStore(request.cookies)
    request.state.token_store = token_store
    response = await call_next(request)
    if token_store.has_pending_operations:
        token_store.apply(response)
    return response
