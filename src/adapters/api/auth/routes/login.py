from __future__ import annotations

"""
Login route.

Exchanges credentials for a token pair at the backend and stores both tokens
in httpOnly cookies. Tokens are never echoed back to the browser.
"""

from fastapi import APIRouter, status
from structlog import get_logger

from src.adapters.api.auth.schemas import LoginRequest
from src.core.dependencies.auth import BackendGateway, TokenStore
from src.core.exceptions import (
    AccountLockedError,
    BackendUnavailableError,
    InvalidCredentialsError,
    LoginError,
    LoginRateLimitedError,
    backend_message,
)
from src.domain.value_objects.token_pair import TokenPair

logger = get_logger(__name__)
router = APIRouter()

DEFAULT_RETRY_AFTER_SECONDS = 60


def _retry_after(header_value: str | None) -> int:
    try:
        return int(header_value) if header_value else DEFAULT_RETRY_AFTER_SECONDS
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


def _unreachable() -> LoginError:
    return LoginError(
        "login_unreachable",
        code="login_unreachable",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Log in with email and password",
    responses={
        200: {"description": "Tokens stored in cookies"},
        401: {"description": "Invalid email or password"},
        403: {"description": "Account is locked"},
        429: {"description": "Too many login attempts"},
        500: {"description": "Backend unreachable"},
    },
)
async def login(payload: LoginRequest, backend: BackendGateway, token_store: TokenStore) -> dict:
    """Authenticates against the backend and sets the token cookies.

    Returns:
        ``{"success": true, "mustChangePassword": bool}``

    Raises:
        LoginError: Any failed attempt, rendered as
            ``{"success": false, "error": ...}`` by the global handler.
    """
    try:
        response = await backend.login(payload.email, payload.password)
    except BackendUnavailableError as exc:
        raise _unreachable() from exc

    if response.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        raise LoginRateLimitedError(retry_after=_retry_after(response.headers.get("Retry-After")))
    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        raise InvalidCredentialsError()
    if response.status_code == status.HTTP_403_FORBIDDEN:
        raise AccountLockedError()

    try:
        data = response.json()
    except ValueError:
        data = None

    if not response.is_success:
        detail = backend_message(data)
        raise LoginError(
            detail or "login_failed",
            status_code=response.status_code,
            translatable=detail is None,
        )

    try:
        pair = TokenPair.from_login_payload(data if isinstance(data, dict) else {})
    except ValueError as exc:
        logger.error("login_response_invalid", error=str(exc))
        raise _unreachable() from exc

    token_store.set_token_pair(pair)
    must_change_password = bool(data.get("must_change_password", False))
    logger.info("login_succeeded", must_change_password=must_change_password)
    return {"success": True, "mustChangePassword": must_change_password}
