"""Product API endpoints.

Provides listing, filtering, search and lookup of products.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.api.dependencies import get_catalog_service, get_product_filter
from storefront.api.schemas import (
    ErrorResponse,
    FilterPanelResponse,
    FilterSectionSchema,
    ProductListResponse,
    ProductSchema,
    product_to_schema,
    products_to_response,
)
from storefront.catalog.filters import ProductFilter, SortOrder
from storefront.catalog.service import CatalogService
from storefront.ui.filter_label import filter_labels

router = APIRouter(prefix="/products", tags=["Products"])

categories_router = APIRouter(prefix="/categories", tags=["Products"])


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    summary="Filter products",
    description="List products matching the filters, in the requested order.",
)
async def list_products(
    filters: Annotated[ProductFilter, Depends(get_product_filter)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    sort: Annotated[
        SortOrder | None,
        Query(description="name, price_asc, price_desc or relevance"),
    ] = None,
) -> ProductListResponse:
    """List filtered products.

    Without an explicit sort, searches are ranked by relevance and
    everything else is ordered by name.

    Args:
        filters: Filter parameters.
        service: Catalog service.
        sort: Result ordering.

    Returns:
        Matching products with up to four preview images.
    """
    products = await service.browse(filters, sort)
    return products_to_response(products)


@router.get(
    "/all",
    response_model=ProductListResponse,
    summary="All products",
)
async def list_all_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """List every product with full detail, ordered by name."""
    return products_to_response(await service.list_all())


@router.get(
    "/featured",
    response_model=ProductListResponse,
    summary="Featured products",
    description="Up to six featured products that are in stock.",
)
async def list_featured_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """List featured products for the homepage carousel."""
    return products_to_response(await service.featured())


@router.get(
    "/search",
    response_model=ProductListResponse,
    summary="Search products",
    description="Relevance-ranked search; name matches weigh more than description matches.",
)
async def search_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    q: Annotated[str, Query(description="Search term")] = "",
) -> ProductListResponse:
    """Search products by name and description."""
    return products_to_response(await service.search(q))


@router.get(
    "/lookup",
    response_model=ProductListResponse,
    summary="Products by ID",
    description="Resolve cart or checkout product IDs. Unknown IDs are skipped.",
)
async def lookup_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    ids: Annotated[list[str] | None, Query(description="Product IDs")] = None,
) -> ProductListResponse:
    """Look up products by ID."""
    return products_to_response(await service.get_cart_products(ids or []))


@router.get(
    "/filters",
    response_model=FilterPanelResponse,
    summary="Filter panel",
    description="Active filters and the rendered filter section headers.",
)
async def filter_panel(
    filters: Annotated[ProductFilter, Depends(get_product_filter)],
) -> FilterPanelResponse:
    """Render the filter section headers for the current filters.

    Clearing happens client side through the button's data-filter-key.
    """
    labels = filter_labels(filters, on_clear=lambda key: None)
    return FilterPanelResponse(
        active=filters.active_keys(),
        sections=[
            FilterSectionSchema(
                key=label.filter_key,
                label=label.label,
                active=label.is_active,
                html=label.render(),
            )
            for label in labels
        ],
    )


@router.get(
    "/{slug}",
    response_model=ProductSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    slug: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductSchema:
    """Get a product by slug.

    Args:
        slug: Product slug.
        service: Catalog service.

    Returns:
        Product details.

    Raises:
        HTTPException: If product not found.
    """
    product = await service.get_product(slug)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "PRODUCT_NOT_FOUND",
                "message": f"Product '{slug}' not found",
            },
        )
    return product_to_schema(product)


@categories_router.get(
    "/{slug}/products",
    response_model=ProductListResponse,
    summary="Products in category",
)
async def list_category_products(
    slug: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """List products in a category, ordered by name."""
    return products_to_response(await service.by_category(slug))
