from __future__ import annotations

"""Subpackage aggregating individual auth and account route modules."""

__all__ = [
    "login",
    "logout",
    "refresh",
    "me",
    "recent_actions",
    "profile",
    "change_password",
    "email_verification",
]
