from __future__ import annotations

"""Refresh route used by browser clients after a ``401`` from another route."""

from fastapi import APIRouter, status

from src.core.dependencies.auth import Refresher, TokenStore
from src.core.exceptions import BackendUnavailableError, NotAuthenticatedError, SessionExpiredError

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Refresh the access token cookie",
    responses={
        401: {"description": "No refresh token, or the session expired"},
        500: {"description": "Backend unreachable"},
    },
)
async def refresh_session(token_store: TokenStore, refresher: Refresher) -> dict:
    """Exchanges the refresh cookie for a new access token cookie.

    A rejected refresh clears both cookies and answers ``401`` with the
    session-expired message.
    """
    if not token_store.refresh_token:
        raise NotAuthenticatedError("no_refresh_token", code="no_refresh_token")

    try:
        access_token = await refresher.refresh_or_raise()
    except BackendUnavailableError as exc:
        raise BackendUnavailableError("refresh_failed") from exc

    if access_token is None:
        raise SessionExpiredError()
    return {"success": True}
