"""Bearer-authenticated backend calls with refresh-and-retry.

Every proxy route goes through ``AuthenticatedFetch.fetch``. A logical call
makes at most one refresh attempt and at most one retry.
"""

from typing import Any, Mapping, Optional

import httpx
from structlog import get_logger

from src.core.exceptions import NotAuthenticatedError, SessionExpiredError
from src.domain.interfaces.backend import IBackendGateway
from src.domain.interfaces.token_store import ITokenStore
from src.domain.services.auth.token_refresher import TokenRefresher

logger = get_logger(__name__)


class AuthenticatedFetch:
    """Sends backend requests on behalf of the current session.

    The algorithm:
        1. Obtain an access token. With none available the call fails with
           ``NotAuthenticatedError`` (no refresh token was ever present) or
           ``SessionExpiredError`` (the refresh token was rejected), and no
           backend request is made.
        2. Send the request with ``Authorization: Bearer <token>``.
        3. On ``401``, refresh once. If that succeeds, retry once and return
           the retry's response whatever its status. If it fails, raise
           ``SessionExpiredError``; the token store is already empty.
        4. Any other status is returned unchanged.

    When step 1 had to refresh, a ``401`` from step 2 is returned as-is.
    """

    def __init__(
        self,
        token_store: ITokenStore,
        backend: IBackendGateway,
        refresher: Optional[TokenRefresher] = None,
    ):
        self.token_store = token_store
        self.backend = backend
        self.refresher = refresher or TokenRefresher(token_store, backend)

    async def fetch(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Performs one logical authenticated call.

        Raises:
            NotAuthenticatedError: No access or refresh token exists.
            SessionExpiredError: The refresh attempt failed.
            BackendUnavailableError: The backend could not be reached.
        """
        had_refresh_token = bool(self.token_store.refresh_token)
        refreshed_on_lookup = not self.token_store.access_token
        access_token = await self.refresher.get_access_token()
        if access_token is None:
            if had_refresh_token:
                logger.info("session_expired", method=method, path=path, stage="token_lookup")
                raise SessionExpiredError()
            raise NotAuthenticatedError()

        response = await self._send(method, path, access_token, params, json, headers)
        if response.status_code != 401:
            return response
        if refreshed_on_lookup:
            # The refresh budget was spent obtaining this token.
            logger.info("fresh_access_token_rejected", method=method, path=path)
            return response

        logger.info("access_token_rejected", method=method, path=path)
        new_token = await self.refresher.refresh_access_token()
        if new_token is None:
            logger.info("session_expired", method=method, path=path, stage="retry")
            raise SessionExpiredError()

        return await self._send(method, path, new_token, params, json, headers)

    async def _send(
        self,
        method: str,
        path: str,
        access_token: str,
        params: Optional[Mapping[str, Any]],
        json: Any,
        headers: Optional[Mapping[str, str]],
    ) -> httpx.Response:
        request_headers = dict(headers or {})
        request_headers["Authorization"] = f"Bearer {access_token}"
        return await self.backend.request(
            method, path, params=params, json=json, headers=request_headers
        )
