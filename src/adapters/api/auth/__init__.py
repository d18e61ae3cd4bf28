from __future__ import annotations

"""Auth router package: session, account and email verification endpoints."""

from fastapi import APIRouter

from .routes import change_password as change_password_route
from .routes import email_verification as email_verification_route
from .routes import login as login_route
from .routes import logout as logout_route
from .routes import me as me_route
from .routes import profile as profile_route
from .routes import recent_actions as recent_actions_route
from .routes import refresh as refresh_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(login_route.router, prefix="/login")
router.include_router(logout_route.router, prefix="/logout")
router.include_router(refresh_route.router, prefix="/refresh")
router.include_router(recent_actions_route.router, prefix="/me/recent-actions")
router.include_router(me_route.router, prefix="/me")
router.include_router(profile_route.router, prefix="/profile")
router.include_router(change_password_route.router, prefix="/change-password")
router.include_router(email_verification_route.router)

__all__ = ["router"]
