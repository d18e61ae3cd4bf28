from .authenticated_fetch import AuthenticatedFetch
from .token_refresher import TokenRefresher

__all__ = [
    "AuthenticatedFetch",
    "TokenRefresher",
]
