"""Shared API dependencies."""

from typing import Annotated

from fastapi import Query

from storefront.catalog.filters import ProductFilter
from storefront.catalog.repository import CustomerRepository
from storefront.catalog.service import CatalogService
from storefront.infrastructure.config import settings
from storefront.infrastructure.content_store import get_content_store


def get_catalog_service() -> CatalogService:
    """Get catalog service over the shared content store."""
    return CatalogService(
        get_content_store(),
        low_stock_threshold=settings.low_stock_threshold,
    )


def get_customer_repository() -> CustomerRepository:
    """Get customer repository over the shared content store."""
    return CustomerRepository(get_content_store())


def get_product_filter(
    category: Annotated[str, Query(description="Category slug")] = "",
    color: Annotated[str, Query(description="Exact color")] = "",
    material: Annotated[str, Query(description="Exact material")] = "",
    min_price: Annotated[float, Query(description="Minimum price, 0 disables")] = 0,
    max_price: Annotated[float, Query(description="Maximum price, 0 disables")] = 0,
    q: Annotated[str, Query(description="Search name and description")] = "",
    in_stock: Annotated[bool, Query(description="Only products in stock")] = False,
) -> ProductFilter:
    """Build a ProductFilter from query parameters."""
    return ProductFilter(
        category_slug=category,
        color=color,
        material=material,
        min_price=min_price,
        max_price=max_price,
        search_query=q,
        in_stock=in_stock,
    )
