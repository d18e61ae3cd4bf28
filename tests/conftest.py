import os

# Settings are read at import time
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_JSON", "false")

import httpx
import pytest
import pytest_asyncio

from src.core.application import create_application
from src.infrastructure.backend.client import BackendClient
from tests.utils.cookies import ACCESS_COOKIE, REFRESH_COOKIE
from tests.utils.scripted_server import ScriptedServer

BACKEND_URL = "https://backend.test/api/v1"


@pytest.fixture
def backend_server():
    """The remote platform backend, scripted per test."""
    return ScriptedServer(prefix="/api/v1")


@pytest_asyncio.fixture
async def backend_client(backend_server):
    client = BackendClient(BACKEND_URL, timeout=5.0, transport=backend_server.transport)
    yield client
    await client.aclose()


@pytest.fixture
def app(backend_client):
    return create_application(backend=backend_client)


@pytest_asyncio.fixture
async def async_client(app):
    """Provides an async test client speaking to the portal app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def signed_in(async_client):
    """Puts both token cookies in the client jar."""

    def _sign_in(access_token="access-1", refresh_token="refresh-1"):
        if access_token:
            async_client.cookies.set(ACCESS_COOKIE, access_token)
        if refresh_token:
            async_client.cookies.set(REFRESH_COOKIE, refresh_token)
        return async_client

    return _sign_in

