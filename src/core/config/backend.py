"""Remote backend API settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class BackendSettings(BaseSettings):
    """Location of the platform backend every proxy route forwards to.

    ``BACKEND_API_URL`` already carries the API version prefix, so resource
    paths are appended directly (``<base>/library/parts/search``).
    """

    BACKEND_API_URL: str = "https://alanapidev.lamlinks.com/api/v1"
    BACKEND_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    @field_validator("BACKEND_API_URL", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
