from __future__ import annotations

# FastAPI & typing
from typing import Annotated

from fastapi import Depends, Request

# Project imports
from src.core.exceptions import BackendUnavailableError
from src.domain.interfaces.backend import IBackendGateway
from src.domain.interfaces.token_store import ITokenStore
from src.domain.services.auth.authenticated_fetch import AuthenticatedFetch
from src.domain.services.auth.token_refresher import TokenRefresher
from src.infrastructure.token_store.cookie_store import CookieTokenStore

__all__ = [
    "get_backend",
    "get_token_store",
    "get_token_refresher",
    "get_authenticated_fetch",
    "BackendGateway",
    "TokenStore",
    "Refresher",
    "AuthFetch",
]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


def get_backend(request: Request) -> IBackendGateway:
    """Return the application-wide backend gateway opened by the lifespan."""
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise BackendUnavailableError()
    return backend


def get_token_store(request: Request) -> ITokenStore:
    """Return the cookie token store bound to this request.

    The token cookie middleware normally creates it; a store is created here
    only when the route is mounted without that middleware.
    """
    token_store = getattr(request.state, "token_store", None)
    if token_store is None:
        token_store = CookieTokenStore(request.cookies)
        request.state.token_store = token_store
    return token_store


# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------


BackendGateway = Annotated[IBackendGateway, Depends(get_backend)]
TokenStore = Annotated[ITokenStore, Depends(get_token_store)]


def get_token_refresher(token_store: TokenStore, backend: BackendGateway) -> TokenRefresher:
    """One refresher per request, shared by every fetch in that request."""
    return TokenRefresher(token_store, backend)


Refresher = Annotated[TokenRefresher, Depends(get_token_refresher)]


def get_authenticated_fetch(
    token_store: TokenStore, backend: BackendGateway, refresher: Refresher
) -> AuthenticatedFetch:
    return AuthenticatedFetch(token_store, backend, refresher)


AuthFetch = Annotated[AuthenticatedFetch, Depends(get_authenticated_fetch)]
