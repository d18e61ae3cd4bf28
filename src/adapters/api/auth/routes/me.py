from __future__ import annotations

"""Current-account routes: profile data, preferences and product access."""

from typing import Any, Dict

from fastapi import APIRouter, Body

from src.adapters.api.proxy import Proxy

router = APIRouter()


@router.get("", summary="Get the current user")
async def get_current_user(proxy: Proxy):
    return await proxy.forward("GET", "/auth/me", failure_message="fetch_user_failed")


@router.get("/preferences", summary="Get the current user's preferences")
async def get_preferences(proxy: Proxy):
    return await proxy.forward("GET", "/auth/me/preferences", failure_message="fetch_preferences_failed")


@router.put("/preferences", summary="Update the current user's preferences")
async def update_preferences(proxy: Proxy, payload: Dict[str, Any] = Body(...)):
    """Forwards a partial preferences document unchanged."""
    return await proxy.forward(
        "PUT", "/auth/me/preferences", json=payload, failure_message="update_preferences_failed"
    )


@router.get("/products", summary="List the products the current user can access")
async def get_products(proxy: Proxy):
    return await proxy.forward("GET", "/auth/me/products", failure_message="fetch_user_products_failed")
