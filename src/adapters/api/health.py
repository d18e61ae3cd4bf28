"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.core.config.settings import settings
from src.utils.i18n import get_translated_message

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    backend_url: str
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Liveness check. The backend is not contacted; its configured URL is reported.
    """
    language = request.state.language
    return HealthResponse(
        status="ok",
        env=settings.APP_ENV,
        message=get_translated_message("health_status_ok", language),
        backend_url=settings.BACKEND_API_URL,
        timestamp=datetime.now(timezone.utc),
    )
