"""Domain services of the authenticated request pipeline.

- Token Refresher: exchanges a refresh token for a new access token and
  clears the store when that fails.
- Authenticated Fetch: bearer-authenticated backend calls with a single
  refresh and a single retry on ``401``.
"""

from .auth import AuthenticatedFetch, TokenRefresher

__all__ = [
    "AuthenticatedFetch",
    "TokenRefresher",
]
