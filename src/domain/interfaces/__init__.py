"""Domain interfaces for dependency inversion.

The request pipeline depends on these abstractions rather than on cookies or
on a particular HTTP client, so the same services run at the server boundary
and in tests.
"""

from .backend import IBackendGateway
from .token_store import ITokenStore

__all__ = [
    "IBackendGateway",
    "ITokenStore",
]
