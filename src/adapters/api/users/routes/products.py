from __future__ import annotations

"""Product access assignments for users of the organization."""

from fastapi import APIRouter

from src.adapters.api.proxy import Proxy, path_segment

router = APIRouter()


@router.get("/organization/products", summary="List the organization's products")
async def list_organization_products(proxy: Proxy):
    return await proxy.forward(
        "GET", "/users/organization/products", failure_message="fetch_organization_products_failed"
    )


@router.get("/{user_id}/products", summary="List a user's products")
async def list_user_products(user_id: str, proxy: Proxy):
    return await proxy.forward(
        "GET",
        f"/users/{path_segment(user_id)}/products",
        failure_message="fetch_user_products_failed",
    )


@router.post("/{user_id}/products/{product_id}", status_code=201, summary="Grant a product")
async def assign_product(user_id: str, product_id: str, proxy: Proxy):
    return await proxy.forward(
        "POST",
        f"/users/{path_segment(user_id)}/products/{path_segment(product_id)}",
        failure_message="assign_product_failed",
        success_status=201,
    )


@router.delete("/{user_id}/products/{product_id}", summary="Revoke a product")
async def remove_product(user_id: str, product_id: str, proxy: Proxy):
    """Answers ``204`` when the backend has no body to return."""
    return await proxy.forward(
        "DELETE",
        f"/users/{path_segment(user_id)}/products/{path_segment(product_id)}",
        failure_message="remove_product_failed",
        success_status=200,
    )
