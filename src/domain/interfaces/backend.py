"""Backend gateway interface.

Everything the portal knows about its data comes from the remote backend
API. This interface narrows that dependency to plain HTTP exchanges so the
domain services can be exercised against any transport.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import httpx


class IBackendGateway(ABC):
    """Interface for sending requests to the remote backend API."""

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Sends one request to ``<base>/<path>``.

        Args:
            method: HTTP method.
            path: Resource path relative to the configured base URL.
            params: Query parameters.
            json: JSON-serializable body.
            headers: Extra request headers.

        Returns:
            The backend response, whatever its status.

        Raises:
            BackendUnavailableError: If the backend could not be reached.
        """
        raise NotImplementedError

    @abstractmethod
    async def refresh(self, refresh_token: str) -> httpx.Response:
        """Calls ``POST /auth/refresh`` with the given refresh token."""
        raise NotImplementedError

    @abstractmethod
    async def login(self, email: str, password: str) -> httpx.Response:
        """Calls ``POST /auth/login`` with the submitted credentials."""
        raise NotImplementedError

    @abstractmethod
    async def logout(self, access_token: str) -> httpx.Response:
        """Calls ``POST /auth/logout`` on behalf of ``access_token``."""
        raise NotImplementedError
