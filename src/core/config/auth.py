"""Authentication cookie and token-lifetime settings.
"""

import logging
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines how the access/refresh token pair is persisted at the browser boundary.

    Both tokens live in httpOnly cookies so that browser scripts never see them.
    The access cookie lifetime follows the ``expires_in`` returned by the backend
    and falls back to ``ACCESS_TOKEN_MAX_AGE_SECONDS``; the refresh cookie always
    lives for ``REFRESH_TOKEN_MAX_AGE_SECONDS``.

    Security Note:
        - Cookies are marked ``Secure`` only in production so that local
          development over plain HTTP keeps working.
        - ``SameSite=lax`` keeps the cookies off cross-site sub-requests while
          still allowing top-level navigations back into the portal.
    """

    ACCESS_TOKEN_COOKIE_NAME: str = "govt_proc_hub_access_token"
    REFRESH_TOKEN_COOKIE_NAME: str = "govt_proc_hub_refresh_token"

    ACCESS_TOKEN_MAX_AGE_SECONDS: int = Field(default=8 * 60 * 60, gt=0)
    REFRESH_TOKEN_MAX_AGE_SECONDS: int = Field(default=7 * 24 * 60 * 60, gt=0)

    COOKIE_SAMESITE: Literal["lax", "strict", "none"] = "lax"
    COOKIE_PATH: str = "/"

    @model_validator(mode="after")
    def _check_cookie_names(self) -> "AuthSettings":
        """Rejects configurations where both tokens would share one cookie."""
        if self.ACCESS_TOKEN_COOKIE_NAME == self.REFRESH_TOKEN_COOKIE_NAME:
            error_msg = "ACCESS_TOKEN_COOKIE_NAME and REFRESH_TOKEN_COOKIE_NAME must differ."
            logger.error(error_msg)
            raise ValueError(error_msg)
        return self
