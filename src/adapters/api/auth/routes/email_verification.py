from __future__ import annotations

"""
Email verification routes.

Both routes are reachable without a session: the link in a verification
email is usually opened before the user has signed in.
"""

from typing import Any

from fastapi import APIRouter, Request

from src.adapters.api.auth.schemas import ResendVerificationRequest, VerifyEmailRequest
from src.adapters.api.proxy import call_unauthenticated
from src.core.dependencies.auth import BackendGateway
from src.core.exceptions import ValidationError
from src.utils.i18n import get_translated_message

router = APIRouter()


def _message(data: Any, default_key: str, language: str) -> str:
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        return data["message"]
    return get_translated_message(default_key, language)


@router.post("/verify-email", summary="Confirm an email address")
async def verify_email(request: Request, payload: VerifyEmailRequest, backend: BackendGateway) -> dict:
    if not payload.token:
        raise ValidationError("verification_token_required")

    data = await call_unauthenticated(
        backend,
        "POST",
        "/auth/verify-email",
        json={"token": payload.token},
        failure_message="verify_email_failed",
    )
    return {"success": True, "message": _message(data, "email_verified", request.state.language)}


@router.post("/resend-verification", summary="Send a new verification email")
async def resend_verification(
    request: Request, payload: ResendVerificationRequest, backend: BackendGateway
) -> dict:
    """Always phrased so that it does not reveal whether the address exists."""
    if not payload.email:
        raise ValidationError("email_required")

    data = await call_unauthenticated(
        backend,
        "POST",
        "/auth/resend-verification",
        json={"email": payload.email},
        failure_message="send_verification_failed",
    )
    return {"success": True, "message": _message(data, "verification_sent", request.state.language)}
