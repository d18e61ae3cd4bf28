import httpx
import pytest
import pytest_asyncio

from src.client import PortalSession


@pytest.fixture
def backend(backend_server):
    """Backend that issues ``a-1``/``r-1`` on the first login and ``a-2``/``r-2`` after."""
    backend_server.on(
        "POST",
        "/auth/login",
        httpx.Response(200, json={"access_token": "a-1", "refresh_token": "r-1", "expires_in": 900}),
        httpx.Response(200, json={"access_token": "a-2", "refresh_token": "r-2", "expires_in": 900}),
    )
    return backend_server


@pytest_asyncio.fixture
async def browser(app):
    """A browser session talking to the portal app in-process."""
    async with PortalSession("http://testserver", transport=httpx.ASGITransport(app=app)) as session:
        yield session
