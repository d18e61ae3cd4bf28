"""Token storage interface.

The token store is the only shared mutable state of the request pipeline.
Only the token refresher and the explicit login and logout operations write
to it; everything else reads.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.value_objects.token_pair import TokenPair


class ITokenStore(ABC):
    """Interface for persisting the current access/refresh token pair.

    Implementations decide where tokens live: the server boundary keeps them
    in httpOnly cookies, tests and scripts keep them in memory.
    """

    @property
    @abstractmethod
    def access_token(self) -> Optional[str]:
        """The current access token, or ``None`` if there is none."""
        raise NotImplementedError

    @property
    @abstractmethod
    def refresh_token(self) -> Optional[str]:
        """The current refresh token, or ``None`` if there is none."""
        raise NotImplementedError

    @abstractmethod
    def set_access_token(self, token: str, expires_in: Optional[int] = None) -> None:
        """Overwrites the access token after a successful refresh.

        Args:
            token: The new access token.
            expires_in: Lifetime in seconds; implementations fall back to
                their configured default when ``None``.
        """
        raise NotImplementedError

    @abstractmethod
    def set_token_pair(self, pair: TokenPair) -> None:
        """Stores both tokens after a successful login."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Discards both tokens. Called on logout and on refresh failure."""
        raise NotImplementedError
