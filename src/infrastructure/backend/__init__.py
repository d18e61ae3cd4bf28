from .client import BackendClient

__all__ = ["BackendClient"]
