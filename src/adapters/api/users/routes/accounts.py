from __future__ import annotations

"""
User administration routes.

Organization administrators manage the accounts of their organization. The
backend's user endpoints use trailing slashes, which are kept here.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Query

from src.adapters.api.proxy import Proxy, path_segment

router = APIRouter()


@router.get("", summary="List users of the organization")
async def list_users(proxy: Proxy, include_inactive: Optional[str] = Query(default=None)):
    """Inactive users are included only for ``include_inactive=true``."""
    params = {"include_inactive": "true"} if include_inactive == "true" else None
    return await proxy.forward("GET", "/users/", params=params, failure_message="fetch_users_failed")


@router.post("", status_code=201, summary="Create a user")
async def create_user(proxy: Proxy, payload: Dict[str, Any] = Body(...)):
    return await proxy.forward(
        "POST", "/users/", json=payload, failure_message="create_user_failed", success_status=201
    )


@router.get("/{user_id}", summary="Get a user")
async def get_user(user_id: str, proxy: Proxy):
    return await proxy.forward(
        "GET", f"/users/{path_segment(user_id)}/", failure_message="fetch_user_failed"
    )


@router.put("/{user_id}", summary="Update a user")
async def update_user(user_id: str, proxy: Proxy, payload: Dict[str, Any] = Body(...)):
    return await proxy.forward(
        "PUT",
        f"/users/{path_segment(user_id)}/",
        json=payload,
        failure_message="update_user_failed",
        success_status=200,
    )


@router.delete("/{user_id}", status_code=204, summary="Deactivate a user")
async def delete_user(user_id: str, proxy: Proxy):
    return await proxy.forward(
        "DELETE",
        f"/users/{path_segment(user_id)}/",
        failure_message="delete_user_failed",
        success_status=204,
    )


@router.post("/{user_id}/activate", summary="Reactivate a user")
async def activate_user(user_id: str, proxy: Proxy):
    return await proxy.forward(
        "POST",
        f"/users/{path_segment(user_id)}/activate/",
        failure_message="activate_user_failed",
        success_status=200,
    )


@router.post("/{user_id}/reset-password", summary="Reset a user's password")
async def reset_user_password(
    user_id: str, proxy: Proxy, payload: Optional[Dict[str, Any]] = Body(default=None)
):
    """The body is optional; without one the backend defaults apply."""
    return await proxy.forward(
        "POST",
        f"/users/{path_segment(user_id)}/reset-password/",
        json=payload or {},
        failure_message="reset_password_failed",
        success_status=200,
    )
