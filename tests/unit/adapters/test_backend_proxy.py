"""Tests for BackendProxy outcome mapping."""

import httpx
import pytest

from src.adapters.api.proxy import BackendProxy, call_unauthenticated, path_segment, present_params
from src.core.exceptions import BackendError, BackendUnavailableError, SessionExpiredError
from src.domain.services.auth.authenticated_fetch import AuthenticatedFetch
from src.infrastructure.token_store import InMemoryTokenStore


@pytest.fixture
def proxy(backend_client):
    store = InMemoryTokenStore(access_token="a-1", refresh_token="r-1")
    return BackendProxy(AuthenticatedFetch(store, backend_client))


def test_path_segment_encodes_reserved_characters():
    assert path_segment("5305-00-123/4567") == "5305-00-123%2F4567"
    assert path_segment(42) == "42"


def test_present_params_drops_empty_values():
    assert present_params({"q": "bolt", "fsc": "", "limit": None, "offset": "0"}) == {
        "q": "bolt",
        "offset": "0",
    }


@pytest.mark.asyncio
async def test_call_returns_payload(proxy, backend_server):
    backend_server.on("GET", "/auth/me", httpx.Response(200, json={"id": 7}))

    assert await proxy.call("GET", "/auth/me", failure_message="fetch_user_failed") == {"id": 7}


@pytest.mark.asyncio
async def test_forward_keeps_status_and_body(proxy, backend_server):
    backend_server.on("POST", "/users/", httpx.Response(201, json={"id": 9}))

    response = await proxy.forward("POST", "/users/", json={}, failure_message="create_user_failed")

    assert response.status_code == 201
    assert response.body == b'{"id":9}'


@pytest.mark.asyncio
async def test_forward_empty_body_becomes_204(proxy, backend_server):
    backend_server.on("DELETE", "/users/9/", httpx.Response(200))

    response = await proxy.forward("DELETE", "/users/9/", failure_message="delete_user_failed")

    assert response.status_code == 204
    assert response.body == b""


@pytest.mark.asyncio
async def test_404_with_empty_payload(proxy, backend_server):
    backend_server.on("GET", "/library/vendor/X/awards", httpx.Response(404, json={"detail": "Not found"}))

    payload = await proxy.call(
        "GET",
        "/library/vendor/X/awards",
        failure_message="fetch_awards_failed",
        empty_on_404={"awards": [], "total_count": 0},
    )

    assert payload == {"awards": [], "total_count": 0}


@pytest.mark.asyncio
async def test_backend_detail_is_forwarded(proxy, backend_server):
    backend_server.on("GET", "/library/parts/1", httpx.Response(422, json={"detail": "Bad NSN"}))

    with pytest.raises(BackendError) as exc_info:
        await proxy.call("GET", "/library/parts/1", failure_message="fetch_part_failed")

    assert exc_info.value.status_code == 422
    assert exc_info.value.message == "Bad NSN"
    assert exc_info.value.translatable is False


@pytest.mark.asyncio
async def test_route_message_without_detail(proxy, backend_server):
    backend_server.on("GET", "/library/parts/1", httpx.Response(502, content=b"Bad gateway"))

    with pytest.raises(BackendError) as exc_info:
        await proxy.call("GET", "/library/parts/1", failure_message="fetch_part_failed")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "fetch_part_failed"
    assert exc_info.value.translatable is True


@pytest.mark.asyncio
async def test_unreadable_success_body(proxy, backend_server):
    backend_server.on("GET", "/auth/me", httpx.Response(200, content=b"<html>"))

    with pytest.raises(BackendUnavailableError):
        await proxy.call("GET", "/auth/me", failure_message="fetch_user_failed")


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_backend_unavailable(proxy, mocker):
    mocker.patch.object(proxy.fetch, "fetch", side_effect=RuntimeError("boom"))

    with pytest.raises(BackendUnavailableError):
        await proxy.call("GET", "/auth/me", failure_message="fetch_user_failed")


@pytest.mark.asyncio
async def test_authentication_errors_pass_through(proxy, mocker):
    mocker.patch.object(proxy.fetch, "fetch", side_effect=SessionExpiredError())

    with pytest.raises(SessionExpiredError):
        await proxy.call("GET", "/auth/me", failure_message="fetch_user_failed")


@pytest.mark.asyncio
async def test_download_keeps_content_headers(proxy, backend_server):
    backend_server.on(
        "GET",
        "/library/awards/5/pdf",
        httpx.Response(
            200,
            content=b"%PDF-1.4",
            headers={"content-type": "application/pdf", "content-disposition": 'attachment; filename="award-5.pdf"'},
        ),
    )

    response = await proxy.download("/library/awards/5/pdf", failure_message="fetch_award_pdf_failed")

    assert response.body == b"%PDF-1.4"
    assert response.media_type == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="award-5.pdf"'


@pytest.mark.asyncio
async def test_call_unauthenticated_sends_no_bearer(backend_server, backend_client):
    backend_server.on("POST", "/auth/verify-email", httpx.Response(200, json={"message": "Verified"}))

    data = await call_unauthenticated(
        backend_client, "POST", "/auth/verify-email", json={"token": "t"}, failure_message="verify_email_failed"
    )

    assert data == {"message": "Verified"}
    assert "authorization" not in backend_server.calls("POST", "/auth/verify-email")[0].headers
