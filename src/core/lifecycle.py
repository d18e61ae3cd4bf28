"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring the
shared backend HTTP client is opened once and closed on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.backend.client import BackendClient


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        A backend client already attached to ``app.state`` (as tests do) is
        used as-is and left open; otherwise one is created from settings and
        closed on shutdown.

        Args:
            app (FastAPI): The FastAPI application instance
        """
        # Startup
        owns_backend = getattr(app.state, "backend", None) is None
        if owns_backend:
            app.state.backend = BackendClient.from_settings()
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            backend_url=settings.BACKEND_API_URL,
        )

        yield

        # Shutdown
        if owns_backend:
            await app.state.backend.aclose()
            app.state.backend = None
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
