from __future__ import annotations

"""Award document download."""

from fastapi import APIRouter

from src.adapters.api.proxy import Proxy
from src.core.exceptions import ValidationError

router = APIRouter()


@router.get("/{order_detail_id}/pdf", summary="Download the award PDF")
async def get_award_pdf(order_detail_id: str, proxy: Proxy):
    """Streams the backend document with its content type and disposition."""
    try:
        parsed_id = int(order_detail_id)
    except ValueError:
        raise ValidationError("invalid_order_detail_id")
    return await proxy.download(
        f"/library/awards/{parsed_id}/pdf", failure_message="fetch_award_pdf_failed"
    )
