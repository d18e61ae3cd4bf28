"""In-memory token store for scripts and tests."""

from typing import Optional

from src.domain.interfaces.token_store import ITokenStore
from src.domain.value_objects.token_pair import TokenPair


class InMemoryTokenStore(ITokenStore):
    """Keeps the token pair on the instance. Lifetimes are recorded, not enforced."""

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self._access_token = access_token
        self._refresh_token = refresh_token
        self.access_expires_in: Optional[int] = None

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    def set_access_token(self, token: str, expires_in: Optional[int] = None) -> None:
        self._access_token = token
        self.access_expires_in = expires_in

    def set_token_pair(self, pair: TokenPair) -> None:
        self._access_token = pair.access_token
        self._refresh_token = pair.refresh_token
        self.access_expires_in = pair.access_expires_in

    def clear(self) -> None:
        self._access_token = None
        self._refresh_token = None
        self.access_expires_in = None

    @property
    def is_empty(self) -> bool:
        return self._access_token is None and self._refresh_token is None
