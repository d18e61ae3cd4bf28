"""Access token refresh against the backend.

A failed refresh is terminal for the session: both tokens are discarded and
the caller sees ``None``. Refresh failures never raise past this module.
"""

import asyncio
from typing import Optional

from structlog import get_logger

from src.core.exceptions import BackendUnavailableError
from src.domain.interfaces.backend import IBackendGateway
from src.domain.interfaces.token_store import ITokenStore
from src.domain.value_objects.token_pair import RefreshedAccessToken

logger = get_logger(__name__)


class TokenRefresher:
    """Exchanges the stored refresh token for a new access token.

    Concurrent refreshes against the same store share a single in-flight
    backend call, so a burst of expired requests triggers one
    ``POST /auth/refresh`` rather than one per request.

    Attributes:
        token_store (ITokenStore): Where tokens are read from and written to.
        backend (IBackendGateway): Gateway used for ``/auth/refresh``.
    """

    def __init__(self, token_store: ITokenStore, backend: IBackendGateway):
        self.token_store = token_store
        self.backend = backend
        self._in_flight: Optional[asyncio.Future] = None

    async def get_access_token(self) -> Optional[str]:
        """Returns a usable access token.

        The stored access token is returned as-is; expiry is discovered when
        the backend answers 401. Without an access token, one refresh is
        attempted when a refresh token exists.

        Returns:
            The access token, or ``None`` if there is no refresh token or the
            refresh failed.
        """
        access_token = self.token_store.access_token
        if access_token:
            return access_token
        if not self.token_store.refresh_token:
            return None
        return await self.refresh_access_token()

    async def refresh_access_token(self) -> Optional[str]:
        """Refreshes the access token, joining a refresh already in flight.

        Returns:
            The new access token, or ``None`` after clearing both tokens.
        """
        in_flight = self._in_flight
        if in_flight is None:
            in_flight = asyncio.ensure_future(self._refresh_swallowing_errors())
            in_flight.add_done_callback(self._clear_in_flight)
            self._in_flight = in_flight
        else:
            logger.debug("token_refresh_joined")
        # Cancelling any one caller must not cancel the shared refresh.
        return await asyncio.shield(in_flight)

    def _clear_in_flight(self, task: asyncio.Future) -> None:
        if self._in_flight is task:
            self._in_flight = None

    async def refresh_or_raise(self) -> Optional[str]:
        """Refreshes once, letting network failures propagate.

        Used by the browser-facing refresh route, which reports an unreachable
        backend differently from a rejected refresh token. A rejected or
        unreadable refresh still clears both tokens.

        Raises:
            BackendUnavailableError: If the backend could not be reached. The
                stored tokens are left untouched in that case.
        """
        refresh_token = self.token_store.refresh_token
        if not refresh_token:
            self.token_store.clear()
            return None

        response = await self.backend.refresh(refresh_token)
        if not response.is_success:
            logger.info("token_refresh_rejected", status=response.status_code)
            self.token_store.clear()
            return None

        try:
            refreshed = RefreshedAccessToken.from_refresh_payload(response.json())
        except ValueError as exc:
            logger.warning("token_refresh_unreadable", error=str(exc))
            self.token_store.clear()
            return None

        self.token_store.set_access_token(refreshed.access_token, refreshed.expires_in)
        logger.info("token_refreshed", expires_in=refreshed.expires_in)
        return refreshed.access_token

    async def _refresh_swallowing_errors(self) -> Optional[str]:
        try:
            return await self.refresh_or_raise()
        except BackendUnavailableError:
            logger.warning("token_refresh_failed", reason="backend_unavailable")
            self.token_store.clear()
            return None
