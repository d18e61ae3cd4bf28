"""End-to-end flows: browser session -> portal routes -> backend.

The backend is scripted; everything in between is the real application.
"""

import asyncio

import httpx
import pytest

from src.core.exceptions import SessionRequestsCancelledError
from tests.utils.cookies import ACCESS_COOKIE, REFRESH_COOKIE, set_cookie_headers
from tests.utils.responders import bearer


def part_for(token: str):
    """Serves part details for ``token`` and rejects every other token."""

    def respond(request):
        if bearer(request) != f"Bearer {token}":
            return httpx.Response(401, json={"detail": "Token expired"})
        return httpx.Response(200, json={"nsn": request.url.path.rsplit("/", 1)[-1]})

    return respond


async def _until(predicate):
    for _ in range(500):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.mark.asyncio
async def test_valid_access_token_passes_through(browser, backend):
    backend.on("GET", "/library/parts/100", part_for("a-1"))
    assert (await browser.login("buyer@example.com", "pw")).success

    response = await browser.fetch("GET", "/api/library/parts/100")

    assert response.status_code == 200
    assert response.json() == {"nsn": "100"}
    assert backend.calls("POST", "/auth/refresh") == []


@pytest.mark.asyncio
async def test_missing_access_token_is_refreshed_then_retried(browser, backend):
    backend.on("POST", "/auth/refresh", httpx.Response(200, json={"access_token": "a-fresh"}))
    backend.on("GET", "/library/parts/100", part_for("a-fresh"))
    await browser.login("buyer@example.com", "pw")
    browser.cookies.delete(ACCESS_COOKIE)

    response = await browser.fetch("GET", "/api/library/parts/100")

    assert response.json() == {"nsn": "100"}
    assert len(backend.calls("POST", "/auth/refresh")) == 1
    assert browser.cookies.get(ACCESS_COOKIE) == "a-fresh"


@pytest.mark.asyncio
async def test_rejected_refresh_expires_the_session(async_client, backend_server):
    async_client.cookies.set(REFRESH_COOKIE, "r-stale")
    backend_server.on("POST", "/auth/refresh", httpx.Response(400, json={"detail": "Invalid refresh token"}))

    response = await async_client.get("/api/library/parts/100")

    assert response.status_code == 401
    assert response.json() == {"error": "Session expired. Please log in again."}
    cookies = set_cookie_headers(response)
    assert "Max-Age=0" in cookies[ACCESS_COOKIE]
    assert "Max-Age=0" in cookies[REFRESH_COOKIE]
    assert backend_server.calls("GET", "/library/parts/100") == []


@pytest.mark.asyncio
async def test_expired_session_replays_queued_calls_after_sign_in(browser, backend):
    backend.on("GET", "/library/parts/100", part_for("a-2"))
    backend.on("GET", "/library/parts/200", part_for("a-2"))
    backend.on("POST", "/auth/refresh", httpx.Response(401, json={"detail": "Refresh token expired"}))
    await browser.login("buyer@example.com", "pw")

    calls = {
        nsn: asyncio.ensure_future(browser.fetch("GET", f"/api/library/parts/{nsn}"))
        for nsn in ("100", "200")
    }
    await _until(lambda: len(browser.coordinator.state.pending_requests) == 2)

    assert browser.prompt.is_open
    assert not any(call.done() for call in calls.values())
    queued = [entry.url for entry in browser.coordinator.state.pending_requests]

    outcome = await browser.reauthenticate("buyer@example.com", "pw")

    assert outcome.success
    assert not browser.prompt.is_open
    assert (await calls["100"]).json() == {"nsn": "100"}
    assert (await calls["200"]).json() == {"nsn": "200"}
    replayed = [
        request.url.path.replace("/api/v1", "/api")
        for request in backend.requests
        if bearer(request) == "Bearer a-2"
    ]
    assert replayed == queued


@pytest.mark.asyncio
async def test_cancelling_reauth_rejects_queued_calls_without_network(browser, backend):
    backend.on("GET", "/auth/me", httpx.Response(401))
    backend.on("POST", "/auth/refresh", httpx.Response(401))
    await browser.login("buyer@example.com", "pw")

    first = asyncio.ensure_future(browser.fetch("GET", "/api/auth/me"))
    await _until(lambda: browser.coordinator.is_awaiting_reauth)
    second = asyncio.ensure_future(browser.fetch("GET", "/api/auth/me"))
    await _until(lambda: len(browser.coordinator.state.pending_requests) == 2)
    sent_before = len(backend.requests)

    assert browser.clear_pending_requests() == 2

    for call in (first, second):
        with pytest.raises(SessionRequestsCancelledError):
            await call
    assert len(backend.requests) == sent_before
    assert not browser.prompt.is_open


@pytest.mark.asyncio
async def test_logout_clears_cookies(browser, backend):
    backend.on("POST", "/auth/logout", httpx.Response(200, json={"detail": "Logged out"}))
    await browser.login("buyer@example.com", "pw")
    assert browser.cookies.get(REFRESH_COOKIE) == "r-1"

    await browser.logout()

    assert backend.calls("POST", "/auth/logout")[0].headers["authorization"] == "Bearer a-1"
    assert browser.cookies.get(ACCESS_COOKIE) is None
    assert browser.cookies.get(REFRESH_COOKIE) is None
