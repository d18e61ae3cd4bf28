"""Browser-side half of the authenticated request pipeline.

``PortalSession`` talks to the portal's own ``/api`` routes the way the web
client does: cookies are carried by the session, ``401`` answers trigger a
refresh through ``/api/auth/refresh``, and a session that cannot be refreshed
is handed to the ``SessionExpiryCoordinator``, which holds every further call
until the user signs in again.
"""

from .coordinator import PendingRequest, SessionExpiryCoordinator, SessionState, SessionStatus
from .prompt import ReauthPrompt
from .session import PortalSession

__all__ = [
    "PendingRequest",
    "PortalSession",
    "ReauthPrompt",
    "SessionExpiryCoordinator",
    "SessionState",
    "SessionStatus",
]
