"""Client session against the portal's ``/api`` routes."""

import asyncio
from typing import Any, Optional

import httpx
from structlog import get_logger

from src.client.coordinator import PendingRequest, SessionExpiryCoordinator
from src.client.prompt import ReauthPrompt
from src.domain.value_objects.login import LoginCredentials, LoginOutcome

logger = get_logger(__name__)

LOGIN_PATH = "/api/auth/login"
LOGOUT_PATH = "/api/auth/logout"
REFRESH_PATH = "/api/auth/refresh"


class PortalSession:
    """One signed-in browser session.

    The session owns an ``httpx.AsyncClient`` whose cookie jar holds the
    httpOnly token cookies set by the portal, so credentials are included on
    every call, and one ``SessionExpiryCoordinator`` for its whole lifetime.
    It is created at session start and reset by ``logout``.

    Example:
        async with PortalSession("https://portal.example.com") as session:
            await session.login(email, password)
            response = await session.fetch("GET", "/api/auth/me")
    """

    def __init__(
        self,
        base_url: str,
        prompt: Optional[ReauthPrompt] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.base_url = httpx.URL(base_url)
        self.coordinator = SessionExpiryCoordinator(prompt)
        self._client = httpx.AsyncClient(base_url=self.base_url, transport=transport, timeout=timeout)
        self._refresh_in_flight: Optional[asyncio.Future] = None

    async def __aenter__(self) -> "PortalSession":
        return self

    async def __aexit__(self, exc_type, exc_val, traceback) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    @property
    def prompt(self) -> ReauthPrompt:
        return self.coordinator.prompt

    async def fetch(self, method: str, url: str, **options: Any) -> httpx.Response:
        """Sends a call with automatic refresh-and-retry on ``401``.

        - While re-authentication is pending the call is queued at once.
        - A non-``401`` response is returned unchanged.
        - A ``401`` from outside ``/api`` or from the refresh route itself is
          returned unchanged.
        - Otherwise one refresh is attempted. On success the call is retried
          once and that response returned, whatever its status. On failure
          the coordinator takes over and the call resolves with its replay
          after the user signs in again.

        Args:
            method: HTTP method.
            url: Path relative to the portal, or an absolute URL.
            **options: Passed to ``httpx.AsyncClient.request`` (``json``,
                ``params``, ``headers``, ``content``...).

        Raises:
            SessionRequestsCancelledError: Re-authentication was cancelled
                while the call was queued.
        """
        if self.coordinator.is_awaiting_reauth:
            return await self.coordinator.enqueue(method, url, options)

        response = await self._client.request(method, url, **options)
        if response.status_code != 401:
            return response
        if not self._is_api_route(url) or self._is_refresh_route(url):
            return response

        if await self._attempt_refresh():
            return await self._client.request(method, url, **options)

        logger.info("session_refresh_exhausted", method=method, url=url)
        return await self.coordinator.enqueue(method, url, options)

    async def login(self, email: str, password: str) -> LoginOutcome:
        """Signs in through ``POST /api/auth/login``; cookies land in the jar."""
        credentials = LoginCredentials(email=email, password=password)
        try:
            response = await self._client.post(
                LOGIN_PATH, json={"email": credentials.email, "password": credentials.password}
            )
        except httpx.HTTPError as exc:
            logger.warning("login_request_failed", error=str(exc))
            return LoginOutcome(success=False, error="Unable to connect to server. Please try again.")

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_success and data.get("success"):
            return LoginOutcome(success=True, must_change_password=bool(data.get("mustChangePassword")))

        retry_after = data.get("retryAfter")
        return LoginOutcome(
            success=False,
            error=data.get("error") or "Login failed",
            retry_after=retry_after if isinstance(retry_after, int) else None,
        )

    async def reauthenticate(self, email: str, password: str) -> LoginOutcome:
        """Signs in from the re-authentication prompt.

        On success the queued calls are replayed in order; on failure the
        prompt stays open and shows the error.
        """
        outcome = await self.login(email, password)
        if outcome.success:
            await self.coordinator.flush(self._replay)
        else:
            self.prompt.show_failure(outcome)
        return outcome

    def clear_pending_requests(self) -> int:
        return self.coordinator.clear_pending_requests()

    async def logout(self) -> None:
        """Best-effort logout. Local state is reset even if the call fails."""
        try:
            await self._client.post(LOGOUT_PATH)
        except httpx.HTTPError as exc:
            logger.warning("logout_request_failed", error=str(exc))
        self.coordinator.clear_pending_requests()
        self._client.cookies.clear()

    async def _replay(self, entry: PendingRequest) -> httpx.Response:
        return await self._client.request(entry.method, entry.url, **entry.options)

    async def _attempt_refresh(self) -> bool:
        in_flight = self._refresh_in_flight
        if in_flight is None:
            in_flight = asyncio.ensure_future(self._refresh())
            in_flight.add_done_callback(self._clear_refresh_in_flight)
            self._refresh_in_flight = in_flight
        return await asyncio.shield(in_flight)

    def _clear_refresh_in_flight(self, task: asyncio.Future) -> None:
        if self._refresh_in_flight is task:
            self._refresh_in_flight = None

    async def _refresh(self) -> bool:
        try:
            response = await self._client.post(REFRESH_PATH)
        except httpx.HTTPError as exc:
            logger.warning("session_refresh_failed", error=str(exc))
            return False
        if not response.is_success:
            logger.info("session_refresh_rejected", status=response.status_code)
        return response.is_success

    def _target(self, url: str) -> httpx.URL:
        target = httpx.URL(url)
        if target.is_relative_url:
            target = self.base_url.join(url)
        return target

    def _is_api_route(self, url: str) -> bool:
        target = self._target(url)
        return target.host == self.base_url.host and target.path.startswith("/api")

    def _is_refresh_route(self, url: str) -> bool:
        return self._target(url).path.startswith(REFRESH_PATH)
