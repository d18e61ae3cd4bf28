"""Value objects describing a login attempt and its outcome."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LoginCredentials:
    """Email and password submitted on the login form."""

    email: str
    password: str

    def __repr__(self) -> str:
        return f"LoginCredentials(email={self.email!r}, password='***')"


@dataclass(frozen=True)
class LoginOutcome:
    """Result of ``POST /api/auth/login`` as seen by a caller.

    Attributes:
        success: Whether both tokens were issued and stored.
        must_change_password: The backend requires a password change before
            the account can be used normally.
        error: Human-readable failure message when ``success`` is false.
        retry_after: Seconds to wait before retrying, set on rate-limited attempts.
    """

    success: bool
    must_change_password: bool = False
    error: Optional[str] = None
    retry_after: Optional[int] = None
