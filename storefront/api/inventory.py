"""Inventory API endpoints.

Stock reports for the admin dashboard. Requires the admin API key.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_catalog_service
from storefront.api.schemas import (
    InventoryReportResponse,
    ProductListResponse,
    products_to_response,
    report_to_response,
)
from storefront.catalog.service import CatalogService

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get(
    "/low-stock",
    response_model=ProductListResponse,
    summary="Low-stock products",
    description="Products with stock above zero and at or below the configured threshold.",
)
async def list_low_stock(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """List low-stock products, lowest stock first."""
    return products_to_response(await service.low_stock())


@router.get(
    "/out-of-stock",
    response_model=ProductListResponse,
    summary="Out-of-stock products",
)
async def list_out_of_stock(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """List products with no stock, ordered by name."""
    return products_to_response(await service.out_of_stock())


@router.get(
    "/report",
    response_model=InventoryReportResponse,
    summary="Inventory report",
)
async def inventory_report(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> InventoryReportResponse:
    """Get low-stock and out-of-stock products together."""
    return report_to_response(await service.inventory_report())
