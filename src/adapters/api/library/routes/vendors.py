from __future__ import annotations

"""
Vendor library routes.

Vendors are addressed by CAGE code. Award, booking and solicitation history
for a vendor without records is served as an empty document instead of 404.
"""

from fastapi import APIRouter, Query, Request

from src.adapters.api.proxy import Proxy, path_segment, present_params
from src.core.exceptions import ValidationError

router = APIRouter()

SEARCH_PARAMS = ("q", "cage_code", "uei", "duns", "contact_email", "limit", "offset")


def _require_cage_code(cage_code: str) -> str:
    if not cage_code.strip():
        raise ValidationError("cage_code_required")
    return path_segment(cage_code)


@router.get("/search", summary="Search vendors")
async def search_vendors(request: Request, proxy: Proxy):
    params = present_params({name: request.query_params.get(name) for name in SEARCH_PARAMS})
    return await proxy.forward(
        "GET", "/library/vendor/search", params=params, failure_message="search_vendors_failed"
    )


@router.get("/{cage_code}", summary="Get vendor details")
async def get_vendor(cage_code: str, proxy: Proxy):
    return await proxy.forward(
        "GET",
        f"/library/vendor/{_require_cage_code(cage_code)}",
        failure_message="fetch_vendor_failed",
    )


@router.get("/{cage_code}/tab-counts", summary="Get record counts for the vendor detail tabs")
async def get_vendor_tab_counts(cage_code: str, proxy: Proxy):
    return await proxy.forward(
        "GET",
        f"/library/vendor/{_require_cage_code(cage_code)}/tab-counts",
        failure_message="fetch_tab_counts_failed",
        empty_on_404={
            "cage_code": cage_code,
            "awards_count": 0,
            "bookings_count": 0,
            "solicitations_count": 0,
        },
    )


@router.get("/{cage_code}/awards", summary="Get recent awards for a vendor")
async def get_vendor_awards(cage_code: str, proxy: Proxy, limit: str = Query(default="20")):
    return await proxy.forward(
        "GET",
        f"/library/vendor/{_require_cage_code(cage_code)}/awards",
        params={"limit": limit or "20"},
        failure_message="fetch_awards_failed",
        empty_on_404={"cage_code": cage_code, "awards": [], "total_count": 0},
    )


@router.get("/{cage_code}/bookings", summary="Get monthly booking totals for a vendor")
async def get_vendor_bookings(cage_code: str, proxy: Proxy, months: str = Query(default="13")):
    return await proxy.forward(
        "GET",
        f"/library/vendor/{_require_cage_code(cage_code)}/bookings",
        params={"months": months or "13"},
        failure_message="fetch_bookings_failed",
        empty_on_404={
            "cage_code": cage_code,
            "months": [],
            "totals": {
                "dscp_total": 0,
                "dscr_total": 0,
                "dscc_total": 0,
                "other_total": 0,
                "grand_total": 0,
            },
        },
    )


@router.get("/{cage_code}/solicitations", summary="Get open solicitations for a vendor")
async def get_vendor_solicitations(cage_code: str, proxy: Proxy):
    return await proxy.forward(
        "GET",
        f"/library/vendor/{_require_cage_code(cage_code)}/solicitations",
        failure_message="fetch_solicitations_failed",
        empty_on_404={"cage_code": cage_code, "solicitations": [], "total_count": 0},
    )
