from __future__ import annotations

"""Logout route. Best effort towards the backend, always clears the cookies."""

from fastapi import APIRouter, status
from structlog import get_logger

from src.core.dependencies.auth import BackendGateway, TokenStore
from src.core.exceptions import BackendUnavailableError

logger = get_logger(__name__)
router = APIRouter()


@router.post("", status_code=status.HTTP_200_OK, summary="Log out the current session")
async def logout(backend: BackendGateway, token_store: TokenStore) -> dict:
    """Invalidates the session at the backend and clears both token cookies.

    The backend call is skipped without an access token, and its failure is
    only logged: the caller always gets ``{"success": true}``.
    """
    access_token = token_store.access_token
    if access_token:
        try:
            response = await backend.logout(access_token)
            if not response.is_success:
                logger.info("backend_logout_rejected", status=response.status_code)
        except BackendUnavailableError:
            logger.warning("backend_logout_failed")

    token_store.clear()
    logger.info("logout_completed")
    return {"success": True}
