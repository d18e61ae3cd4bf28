"""HTTP client for the remote platform backend.

One ``BackendClient`` is created per application in the lifespan handler and
shared by every request. It owns an ``httpx.AsyncClient`` bound to the
configured base URL, so callers only pass resource paths.
"""

from typing import Any, Mapping, Optional

import httpx
import structlog

from src.core.config.settings import settings
from src.core.exceptions import BackendUnavailableError
from src.domain.interfaces.backend import IBackendGateway

logger = structlog.get_logger(__name__)


class BackendClient(IBackendGateway):
    """Concrete backend gateway over ``httpx``.

    Network failures are wrapped in ``BackendUnavailableError`` and never
    retried. Non-2xx responses are returned unchanged; interpreting them is
    up to the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "BackendClient":
        return cls(
            base_url=settings.BACKEND_API_URL,
            timeout=settings.BACKEND_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        kwargs: dict = {}
        if params:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json
        if headers:
            kwargs["headers"] = dict(headers)

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(
                "backend_request_failed",
                method=method,
                path=path,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise BackendUnavailableError() from exc

        logger.debug("backend_request_completed", method=method, path=path, status=response.status_code)
        return response

    async def login(self, email: str, password: str) -> httpx.Response:
        return await self.request("POST", "/auth/login", json={"email": email, "password": password})

    async def logout(self, access_token: str) -> httpx.Response:
        return await self.request(
            "POST", "/auth/logout", headers={"Authorization": f"Bearer {access_token}"}
        )

    async def refresh(self, refresh_token: str) -> httpx.Response:
        return await self.request("POST", "/auth/refresh", json={"refresh_token": refresh_token})

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.info("backend_client_closed", base_url=self.base_url)
