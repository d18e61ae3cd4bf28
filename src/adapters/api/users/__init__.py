from __future__ import annotations

"""Users router package: organization account and product administration."""

from fastapi import APIRouter

from .routes import accounts as accounts_route
from .routes import products as products_route

router = APIRouter(tags=["users"])

# Product routes first: ``/organization/products`` must not match ``/{user_id}/products``
router.include_router(products_route.router, prefix="/users")
router.include_router(accounts_route.router, prefix="/users")

__all__ = ["router"]
