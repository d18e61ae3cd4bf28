"""Cookie-backed token store used at the HTTP boundary.

Tokens arrive with the browser request as httpOnly cookies. Writes are
applied to the in-memory view immediately, so later reads in the same
request see them, and recorded as cookie operations that the token cookie
middleware replays onto the outgoing response.
"""

from typing import Dict, List, Mapping, Optional, Tuple

from starlette.responses import Response

from src.core.config.settings import settings
from src.domain.interfaces.token_store import ITokenStore
from src.domain.value_objects.token_pair import TokenPair

# (cookie name, value or None for deletion, max age)
CookieOperation = Tuple[str, Optional[str], Optional[int]]


class CookieTokenStore(ITokenStore):
    """Token store over one request's cookies.

    Attributes:
        pending_operations: Cookie writes and deletions recorded during the
            request, in order.
    """

    def __init__(self, cookies: Mapping[str, str]):
        self._access_name = settings.ACCESS_TOKEN_COOKIE_NAME
        self._refresh_name = settings.REFRESH_TOKEN_COOKIE_NAME
        self._values: Dict[str, Optional[str]] = {
            self._access_name: cookies.get(self._access_name) or None,
            self._refresh_name: cookies.get(self._refresh_name) or None,
        }
        self.pending_operations: List[CookieOperation] = []

    @property
    def access_token(self) -> Optional[str]:
        return self._values[self._access_name]

    @property
    def refresh_token(self) -> Optional[str]:
        return self._values[self._refresh_name]

    def set_access_token(self, token: str, expires_in: Optional[int] = None) -> None:
        self._set(self._access_name, token, expires_in or settings.ACCESS_TOKEN_MAX_AGE_SECONDS)

    def set_token_pair(self, pair: TokenPair) -> None:
        self.set_access_token(pair.access_token, pair.access_expires_in)
        self._set(self._refresh_name, pair.refresh_token, settings.REFRESH_TOKEN_MAX_AGE_SECONDS)

    def clear(self) -> None:
        for name in (self._access_name, self._refresh_name):
            self._values[name] = None
            self.pending_operations.append((name, None, None))

    def _set(self, name: str, value: str, max_age: int) -> None:
        self._values[name] = value
        self.pending_operations.append((name, value, max_age))

    @property
    def has_pending_operations(self) -> bool:
        return bool(self.pending_operations)

    def apply(self, response: Response) -> None:
        """Writes the recorded cookie operations onto ``response``."""
        for name, value, max_age in self.pending_operations:
            if value is None:
                response.delete_cookie(
                    name,
                    path=settings.COOKIE_PATH,
                    secure=settings.cookie_secure,
                    httponly=True,
                    samesite=settings.COOKIE_SAMESITE,
                )
            else:
                response.set_cookie(
                    name,
                    value,
                    max_age=max_age,
                    path=settings.COOKIE_PATH,
                    secure=settings.cookie_secure,
                    httponly=True,
                    samesite=settings.COOKIE_SAMESITE,
                )
        self.pending_operations.clear()
