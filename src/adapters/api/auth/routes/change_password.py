from __future__ import annotations

"""Password change route for the signed-in user."""

from fastapi import APIRouter, Request

from src.adapters.api.auth.schemas import ChangePasswordRequest
from src.adapters.api.proxy import Proxy
from src.core.exceptions import ValidationError
from src.utils.i18n import get_translated_message

router = APIRouter()


@router.post("", summary="Change the current user's password")
async def change_password(request: Request, payload: ChangePasswordRequest, proxy: Proxy) -> dict:
    if not payload.current_password or not payload.new_password:
        raise ValidationError("passwords_required")

    await proxy.call(
        "POST",
        "/auth/change-password",
        json={
            "current_password": payload.current_password,
            "new_password": payload.new_password,
        },
        failure_message="change_password_failed",
    )
    return {
        "success": True,
        "message": get_translated_message("password_changed", request.state.language),
    }
