"""Token value objects issued by the platform backend.

The portal never decodes or validates tokens itself: they are opaque strings
handed out by ``/auth/login`` and ``/auth/refresh`` and stored in cookies.
These objects only carry the strings together with the lifetimes that decide
how long the cookies live.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class TokenPair:
    """An access token and a refresh token issued together at login.

    Attributes:
        access_token: Short-lived bearer credential sent to the backend.
        refresh_token: Long-lived credential exchanged for new access tokens.
        access_expires_in: Access token lifetime in seconds, if the backend sent one.
        refresh_expires_in: Refresh token lifetime reported by the backend. The
            refresh cookie lifetime is fixed by configuration regardless.
    """

    access_token: str
    refresh_token: str
    access_expires_in: Optional[int] = None
    refresh_expires_in: Optional[int] = None

    def __post_init__(self):
        if not self.access_token:
            raise ValueError("Access token cannot be empty")
        if not self.refresh_token:
            raise ValueError("Refresh token cannot be empty")

    @classmethod
    def from_login_payload(cls, payload: Mapping[str, Any]) -> "TokenPair":
        """Builds a pair from a successful ``/auth/login`` body.

        Raises:
            ValueError: If either token is missing from the payload.
        """
        return cls(
            access_token=payload.get("access_token") or "",
            refresh_token=payload.get("refresh_token") or "",
            access_expires_in=_positive_int(payload.get("expires_in")),
            refresh_expires_in=_positive_int(payload.get("refresh_expires_in")),
        )

    def __repr__(self) -> str:
        return f"TokenPair(access_token='***', refresh_token='***', access_expires_in={self.access_expires_in})"


@dataclass(frozen=True)
class RefreshedAccessToken:
    """A new access token returned by ``/auth/refresh``."""

    access_token: str
    expires_in: Optional[int] = None

    def __post_init__(self):
        if not self.access_token:
            raise ValueError("Access token cannot be empty")

    @classmethod
    def from_refresh_payload(cls, payload: Any) -> "RefreshedAccessToken":
        """Builds the token from a ``/auth/refresh`` body.

        Raises:
            ValueError: If the body is not an object or has no ``access_token``.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("Refresh response is not an object")
        token = payload.get("access_token")
        if not isinstance(token, str):
            raise ValueError("Refresh response has no access token")
        return cls(access_token=token, expires_in=_positive_int(payload.get("expires_in")))

    def __repr__(self) -> str:
        return f"RefreshedAccessToken(access_token='***', expires_in={self.expires_in})"


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return None
