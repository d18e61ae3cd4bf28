"""Domain value objects for the authenticated request pipeline.

Value objects are immutable and compared by their attributes. Token values
are masked in ``repr`` so they never end up in logs.
"""

from .login import LoginCredentials, LoginOutcome
from .token_pair import RefreshedAccessToken, TokenPair

__all__ = [
    "LoginCredentials",
    "LoginOutcome",
    "RefreshedAccessToken",
    "TokenPair",
]
