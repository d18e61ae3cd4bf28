from __future__ import annotations

"""Library router package: parts and vendor search and detail endpoints."""

from fastapi import APIRouter

from .routes import awards as awards_route
from .routes import parts as parts_route
from .routes import vendors as vendors_route

router = APIRouter(prefix="/library", tags=["library"])

router.include_router(parts_route.router, prefix="/parts")
router.include_router(vendors_route.router, prefix="/vendor")
router.include_router(awards_route.router, prefix="/awards")

__all__ = ["router"]
