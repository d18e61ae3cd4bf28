from .cookie_store import CookieTokenStore
from .memory_store import InMemoryTokenStore

__all__ = ["CookieTokenStore", "InMemoryTokenStore"]
