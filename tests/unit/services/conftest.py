import pytest

from src.infrastructure.token_store import InMemoryTokenStore


@pytest.fixture
def token_store():
    """A session whose access token the backend considers expired."""
    return InMemoryTokenStore(access_token="a-old", refresh_token="r-1")
