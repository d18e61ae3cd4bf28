from __future__ import annotations

"""
Parts library routes.

Parts are addressed by National Stock Number (NSN). Search parameters and
backend JSON are forwarded unchanged.
"""

from fastapi import APIRouter, Request

from src.adapters.api.proxy import Proxy, path_segment, present_params
from src.core.exceptions import ValidationError

router = APIRouter()

SEARCH_PARAMS = ("nsn", "niin", "fsc", "q", "limit", "offset")


def _empty_tab_counts(nsn: str) -> dict:
    return {
        "nsn": nsn,
        "procurement_history_count": 0,
        "solicitations_count": 0,
        "manufacturers_count": 0,
        "technical_characteristics_count": 0,
        "end_use_description_count": 0,
        "has_packaging": False,
        "has_procurement_item_description": False,
    }


def _require_nsn(nsn: str) -> str:
    if not nsn.strip():
        raise ValidationError("nsn_required")
    return path_segment(nsn)


@router.get("/search", summary="Search parts")
async def search_parts(request: Request, proxy: Proxy):
    params = present_params({name: request.query_params.get(name) for name in SEARCH_PARAMS})
    return await proxy.forward(
        "GET", "/library/parts/search", params=params, failure_message="search_parts_failed"
    )


@router.get("/{nsn}", summary="Get part details")
async def get_part(nsn: str, proxy: Proxy):
    return await proxy.forward(
        "GET", f"/library/parts/{_require_nsn(nsn)}", failure_message="fetch_part_failed"
    )


@router.get("/{nsn}/tab-counts", summary="Get record counts for the part detail tabs")
async def get_part_tab_counts(nsn: str, proxy: Proxy):
    """A part unknown to the backend reports zero for every tab."""
    return await proxy.forward(
        "GET",
        f"/library/parts/{_require_nsn(nsn)}/tab-counts",
        failure_message="fetch_tab_counts_failed",
        empty_on_404=_empty_tab_counts(nsn),
    )


@router.get("/{nsn}/end-use-description", summary="Get the part's end use description")
async def get_end_use_description(nsn: str, proxy: Proxy):
    return await proxy.forward(
        "GET",
        f"/library/parts/{_require_nsn(nsn)}/end-use-description",
        failure_message="fetch_end_use_failed",
    )


@router.get("/{nsn}/procurement-item-description", summary="Get the procurement item description")
async def get_procurement_item_description(nsn: str, proxy: Proxy):
    return await proxy.forward(
        "GET",
        f"/library/parts/{_require_nsn(nsn)}/procurement-item-description",
        failure_message="fetch_procurement_item_failed",
    )
