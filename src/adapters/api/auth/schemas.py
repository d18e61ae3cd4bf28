from __future__ import annotations

"""Request-payload Pydantic models for the auth and account proxy routes.

Fields the backend validates itself are kept optional here so that a missing
value produces the route's own ``400`` message rather than a schema error.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Payload expected by ``POST /api/auth/login``."""

    email: str = Field(..., examples=["buyer@example.com"])
    password: str = Field(..., examples=["Str0ngP@ssw0rd"])


class ProfileUpdateRequest(BaseModel):
    """Payload expected by ``PUT /api/auth/profile``."""

    first_name: Optional[str] = Field(default=None, examples=["Ada"])
    last_name: Optional[str] = Field(default=None, examples=["Lovelace"])


class ChangePasswordRequest(BaseModel):
    """Payload expected by ``POST /api/auth/change-password``."""

    current_password: Optional[str] = None
    new_password: Optional[str] = None


class VerifyEmailRequest(BaseModel):
    """Payload expected by ``POST /api/auth/verify-email``."""

    token: Optional[str] = None


class ResendVerificationRequest(BaseModel):
    """Payload expected by ``POST /api/auth/resend-verification``."""

    email: Optional[str] = None
