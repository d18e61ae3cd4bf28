"""Tests for AuthenticatedFetch: bearer injection, refresh and single retry."""

import asyncio

import httpx
import pytest

from src.core.exceptions import BackendUnavailableError, NotAuthenticatedError, SessionExpiredError
from src.domain.services.auth.authenticated_fetch import AuthenticatedFetch
from src.infrastructure.token_store import InMemoryTokenStore

from tests.utils.responders import Barrier, accepts_only, bearer


@pytest.fixture
def fetcher(token_store, backend_client):
    return AuthenticatedFetch(token_store, backend_client)


@pytest.mark.asyncio
async def test_sends_bearer_token_and_returns_response(fetcher, backend_server):
    backend_server.on("GET", "/auth/me", httpx.Response(200, json={"id": 7}))

    response = await fetcher.fetch("GET", "/auth/me", headers={"X-Trace": "t-1"})

    assert response.json() == {"id": 7}
    sent = backend_server.calls("GET", "/auth/me")[0]
    assert bearer(sent) == "Bearer a-old"
    assert sent.headers["x-trace"] == "t-1"
    assert backend_server.calls("POST", "/auth/refresh") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 403, 404, 500])
async def test_other_errors_are_returned_unchanged(fetcher, backend_server, status_code):
    backend_server.on("GET", "/auth/me", httpx.Response(status_code, json={"detail": "x"}))

    response = await fetcher.fetch("GET", "/auth/me")

    assert response.status_code == status_code
    assert backend_server.calls("POST", "/auth/refresh") == []


@pytest.mark.asyncio
async def test_without_tokens_no_request_is_made(backend_server, backend_client):
    fetcher = AuthenticatedFetch(InMemoryTokenStore(), backend_client)

    with pytest.raises(NotAuthenticatedError):
        await fetcher.fetch("GET", "/auth/me")

    assert backend_server.requests == []


@pytest.mark.asyncio
async def test_missing_access_token_is_refreshed_first(backend_server, backend_client):
    store = InMemoryTokenStore(refresh_token="r-1")
    backend_server.on("POST", "/auth/refresh", httpx.Response(200, json={"access_token": "a-new"}))
    backend_server.on("GET", "/auth/me", accepts_only("a-new"))

    response = await AuthenticatedFetch(store, backend_client).fetch("GET", "/auth/me")

    assert response.status_code == 200
    assert len(backend_server.calls("GET", "/auth/me")) == 1


@pytest.mark.asyncio
async def test_401_after_refreshing_a_missing_token_is_returned_as_is(backend_server, backend_client):
    store = InMemoryTokenStore(refresh_token="r-1")
    backend_server.on("POST", "/auth/refresh", httpx.Response(200, json={"access_token": "a-new"}))
    backend_server.on("GET", "/auth/me", httpx.Response(401, json={"detail": "Token expired"}))

    response = await AuthenticatedFetch(store, backend_client).fetch("GET", "/auth/me")

    assert response.status_code == 401
    assert len(backend_server.calls("POST", "/auth/refresh")) == 1
    assert len(backend_server.calls("GET", "/auth/me")) == 1
    assert store.access_token == "a-new"


@pytest.mark.asyncio
async def test_rejected_refresh_before_sending_means_session_expired(backend_server, backend_client):
    store = InMemoryTokenStore(refresh_token="r-1")
    backend_server.on("POST", "/auth/refresh", httpx.Response(401, json={"detail": "expired"}))

    with pytest.raises(SessionExpiredError):
        await AuthenticatedFetch(store, backend_client).fetch("GET", "/auth/me")

    assert store.is_empty
    assert backend_server.calls("GET", "/auth/me") == []


@pytest.mark.asyncio
async def test_401_is_refreshed_and_retried_once(fetcher, token_store, backend_server):
    backend_server.on("POST", "/auth/refresh", httpx.Response(200, json={"access_token": "a-new"}))
    backend_server.on("GET", "/auth/me", accepts_only("a-new", {"id": 7}))

    response = await fetcher.fetch("GET", "/auth/me", params={"expand": "org"})

    assert response.json() == {"id": 7}
    attempts = backend_server.calls("GET", "/auth/me")
    assert [bearer(r) for r in attempts] == ["Bearer a-old", "Bearer a-new"]
    assert attempts[1].url.params["expand"] == "org"
    assert token_store.access_token == "a-new"


@pytest.mark.asyncio
async def test_retry_response_is_returned_whatever_its_status(fetcher, backend_server):
    backend_server.on("POST", "/auth/refresh", httpx.Response(200, json={"access_token": "a-new"}))
    backend_server.on("GET", "/auth/me", httpx.Response(401, json={"detail": "still no"}))

    response = await fetcher.fetch("GET", "/auth/me")

    assert response.status_code == 401
    assert len(backend_server.calls("GET", "/auth/me")) == 2
    assert len(backend_server.calls("POST", "/auth/refresh")) == 1


@pytest.mark.asyncio
async def test_retry_keeps_the_request_body(fetcher, backend_server):
    backend_server.on("POST", "/auth/refresh", httpx.Response(200, json={"access_token": "a-new"}))
    backend_server.on("PUT", "/auth/profile", accepts_only("a-new"))

    await fetcher.fetch("PUT", "/auth/profile", json={"first_name": "Ada"})

    bodies = [r.read() for r in backend_server.calls("PUT", "/auth/profile")]
    assert bodies[0] == bodies[1]
    assert b"Ada" in bodies[1]


@pytest.mark.asyncio
async def test_failed_refresh_after_401_expires_the_session(fetcher, token_store, backend_server):
    backend_server.on("POST", "/auth/refresh", httpx.Response(401, json={"detail": "expired"}))
    backend_server.on("GET", "/auth/me", httpx.Response(401))

    with pytest.raises(SessionExpiredError):
        await fetcher.fetch("GET", "/auth/me")

    assert token_store.is_empty
    assert len(backend_server.calls("GET", "/auth/me")) == 1


@pytest.mark.asyncio
async def test_401_without_refresh_token_expires_the_session(backend_server, backend_client):
    store = InMemoryTokenStore(access_token="a-old")
    backend_server.on("GET", "/auth/me", httpx.Response(401))

    with pytest.raises(SessionExpiredError):
        await AuthenticatedFetch(store, backend_client).fetch("GET", "/auth/me")

    assert store.is_empty
    assert backend_server.calls("POST", "/auth/refresh") == []


@pytest.mark.asyncio
async def test_network_failure_during_refresh_expires_the_session(fetcher, token_store, backend_server, mocker):
    backend_server.on("GET", "/auth/me", httpx.Response(401))
    mocker.patch.object(fetcher.backend, "refresh", side_effect=BackendUnavailableError())

    with pytest.raises(SessionExpiredError):
        await fetcher.fetch("GET", "/auth/me")

    assert token_store.is_empty


@pytest.mark.asyncio
async def test_network_failure_on_the_call_propagates(fetcher, mocker):
    mocker.patch.object(fetcher.backend, "request", side_effect=BackendUnavailableError())

    with pytest.raises(BackendUnavailableError):
        await fetcher.fetch("GET", "/auth/me")


@pytest.mark.asyncio
async def test_concurrent_401s_trigger_a_single_refresh(fetcher, backend_server):
    barrier = Barrier(parties=2)

    async def expired_until_refreshed(request):
        if bearer(request) == "Bearer a-new":
            return httpx.Response(200, json={"path": request.url.path})
        await barrier.wait()
        return httpx.Response(401)

    async def slow_refresh(request):
        await asyncio.sleep(0.05)
        return httpx.Response(200, json={"access_token": "a-new"})

    backend_server.on("GET", "/library/parts/123", expired_until_refreshed)
    backend_server.on("GET", "/library/vendor/1ABC2", expired_until_refreshed)
    backend_server.on("POST", "/auth/refresh", slow_refresh)

    part, vendor = await asyncio.gather(
        fetcher.fetch("GET", "/library/parts/123"),
        fetcher.fetch("GET", "/library/vendor/1ABC2"),
    )

    assert part.status_code == vendor.status_code == 200
    assert len(backend_server.calls("POST", "/auth/refresh")) == 1
