from __future__ import annotations

"""Profile update route."""

from fastapi import APIRouter

from src.adapters.api.auth.schemas import ProfileUpdateRequest
from src.adapters.api.proxy import Proxy

router = APIRouter()


@router.put("", summary="Update the current user's name")
async def update_profile(payload: ProfileUpdateRequest, proxy: Proxy) -> dict:
    """Returns ``{"success": true, "user": <updated user>}``."""
    user = await proxy.call(
        "PUT",
        "/auth/profile",
        json=payload.model_dump(exclude_none=True),
        failure_message="update_profile_failed",
    )
    return {"success": True, "user": user}
