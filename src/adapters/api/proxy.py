"""Translation between backend responses and the proxy route contract.

Every authenticated route hands its backend call to ``BackendProxy``, which
runs it through ``AuthenticatedFetch`` and maps the outcome:

- 2xx: the backend JSON, verbatim or wrapped by the route
- 404 on routes with an empty payload: that payload with ``200``
- other non-2xx: ``{"error": detail | message | route message}`` with the
  backend's status
- anything unexpected: ``500 {"error": "An unexpected error occurred"}``

Authentication failures are raised to the global handlers, which answer
``401`` with either ``Not authenticated`` or ``Session expired``.
"""

from typing import Annotated, Any, Mapping, Optional, Tuple
from urllib.parse import quote

import httpx
from fastapi import Depends
from fastapi.responses import JSONResponse, Response
from structlog import get_logger

from src.core.dependencies.auth import AuthFetch
from src.core.exceptions import (
    BackendError,
    BackendUnavailableError,
    PortalError,
    backend_message,
)
from src.domain.interfaces.backend import IBackendGateway
from src.domain.services.auth.authenticated_fetch import AuthenticatedFetch

logger = get_logger(__name__)


def path_segment(value: Any) -> str:
    """URL-encodes a value used as a single backend path segment."""
    return quote(str(value), safe="")


def present_params(params: Mapping[str, Any]) -> dict:
    """Drops query parameters that are ``None`` or empty strings."""
    return {key: value for key, value in params.items() if value not in (None, "")}


class BackendProxy:
    """Runs proxy-route backend calls and normalizes their results.

    Attributes:
        fetch (AuthenticatedFetch): The per-request authenticated fetcher.
    """

    def __init__(self, fetch: AuthenticatedFetch):
        self.fetch = fetch

    async def call(
        self,
        method: str,
        path: str,
        *,
        failure_message: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        empty_on_404: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Performs the call and returns the parsed success payload.

        Args:
            failure_message: Catalog key used when the backend error body has
                no ``detail`` or ``message``.
            empty_on_404: Payload substituted for a backend ``404``.

        Returns:
            The decoded JSON body, or ``None`` for an empty success body.

        Raises:
            AuthenticationError: Not authenticated, or the session expired.
            BackendError: The backend answered with a non-success status.
            BackendUnavailableError: The call failed for any other reason.
        """
        _, payload = await self._exchange(
            method,
            path,
            failure_message=failure_message,
            params=params,
            json=json,
            empty_on_404=empty_on_404,
        )
        return payload

    async def forward(
        self,
        method: str,
        path: str,
        *,
        failure_message: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        empty_on_404: Optional[Mapping[str, Any]] = None,
        success_status: Optional[int] = None,
    ) -> Response:
        """Performs the call and returns the backend JSON verbatim.

        The backend's success status is kept unless ``success_status`` is
        given. An empty body, or a ``success_status`` of ``204``, yields an
        empty ``204`` response.
        """
        status_code, payload = await self._exchange(
            method,
            path,
            failure_message=failure_message,
            params=params,
            json=json,
            empty_on_404=empty_on_404,
        )
        status_code = success_status or status_code
        if status_code == 204 or payload is None:
            return Response(status_code=204)
        return JSONResponse(content=payload, status_code=status_code)

    async def download(self, path: str, *, failure_message: str) -> Response:
        """Streams a binary backend resource back with its content headers."""
        response = await self._send("GET", path)
        if not response.is_success:
            raise self._backend_error(response, failure_message, "GET", path)

        headers = {}
        content_disposition = response.headers.get("content-disposition")
        if content_disposition:
            headers["Content-Disposition"] = content_disposition
        return Response(
            content=response.content,
            status_code=200,
            media_type=response.headers.get("content-type") or "application/pdf",
            headers=headers,
        )

    async def _exchange(
        self,
        method: str,
        path: str,
        *,
        failure_message: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        empty_on_404: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[int, Any]:
        response = await self._send(method, path, params=params, json=json)

        if response.is_success:
            return response.status_code, self._decode(response, method, path)

        if response.status_code == 404 and empty_on_404 is not None:
            logger.debug("backend_not_found_replaced", method=method, path=path)
            return 200, dict(empty_on_404)

        raise self._backend_error(response, failure_message, method, path)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            return await self.fetch.fetch(method, path, params=params, json=json)
        except PortalError:
            raise
        except Exception as exc:
            logger.exception(
                "proxy_request_failed",
                method=method,
                path=path,
                error_type=type(exc).__name__,
            )
            raise BackendUnavailableError() from exc

    @staticmethod
    def _decode(response: httpx.Response, method: str, path: str) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error(
                "backend_response_unreadable",
                method=method,
                path=path,
                status=response.status_code,
                error=str(exc),
            )
            raise BackendUnavailableError() from exc

    @staticmethod
    def _backend_error(
        response: httpx.Response, failure_message: str, method: str, path: str
    ) -> BackendError:
        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = {}

        message = backend_message(payload)
        logger.warning(
            "backend_request_rejected",
            method=method,
            path=path,
            status=response.status_code,
            has_detail=message is not None,
        )
        if message is None:
            return BackendError(response.status_code, failure_message, translatable=True)
        return BackendError(response.status_code, message)


def get_backend_proxy(fetch: AuthFetch) -> BackendProxy:
    return BackendProxy(fetch)


Proxy = Annotated[BackendProxy, Depends(get_backend_proxy)]


async def call_unauthenticated(
    backend: IBackendGateway,
    method: str,
    path: str,
    *,
    failure_message: str,
    json: Any = None,
) -> Any:
    """Calls a public backend endpoint with the same error mapping as ``BackendProxy``."""
    response = await backend.request(method, path, json=json)
    if not response.is_success:
        raise BackendProxy._backend_error(response, failure_message, method, path)
    return BackendProxy._decode(response, method, path)
