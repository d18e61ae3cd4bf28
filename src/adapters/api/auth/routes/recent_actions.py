from __future__ import annotations

"""Recent actions of the current user (recent searches, viewed parts...)."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Query

from src.adapters.api.proxy import Proxy
from src.core.exceptions import ValidationError

router = APIRouter()


@router.get("", summary="List recent actions of one type")
async def list_recent_actions(proxy: Proxy, action_type: Optional[str] = Query(default=None)):
    if not action_type:
        raise ValidationError("action_type_required")
    return await proxy.forward(
        "GET",
        "/auth/me/recent-actions",
        params={"action_type": action_type},
        failure_message="fetch_recent_actions_failed",
    )


@router.post("", summary="Record a recent action")
async def add_recent_action(proxy: Proxy, payload: Dict[str, Any] = Body(...)):
    return await proxy.forward(
        "POST", "/auth/me/recent-actions", json=payload, failure_message="add_recent_action_failed"
    )


@router.delete("/{action_id}", status_code=204, summary="Delete a recent action")
async def delete_recent_action(action_id: str, proxy: Proxy):
    try:
        parsed_id = int(action_id)
    except ValueError:
        raise ValidationError("invalid_action_id")
    return await proxy.forward(
        "DELETE",
        f"/auth/me/recent-actions/{parsed_id}",
        failure_message="delete_recent_action_failed",
        success_status=204,
    )
