"""Shopping assistant tools.

Thin adapters over the catalog service for a conversational agent:
1. search_products - Filtered product search (name order, at most 20)
2. get_product - Full detail for one product
3. check_availability - Stock for a set of product IDs
"""

from typing import Any

import structlog

from storefront.catalog.filters import ProductFilter
from storefront.catalog.models import Product
from storefront.catalog.service import CatalogService
from storefront.domain.exceptions import ContentStoreError
from storefront.ui.utils import format_price

logger = structlog.get_logger()


def summarize_product(product: Product) -> dict[str, Any]:
    """Flatten a product for agent consumption."""
    image = product.primary_image
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "price": format_price(product.price),
        "category": product.category.title if product.category else None,
        "material": product.material,
        "color": product.color,
        "dimensions": product.dimensions,
        "in_stock": product.in_stock,
        "stock": product.stock,
        "assembly_required": product.assembly_required,
        "image_url": image.url if image else None,
    }


def format_error(error: ContentStoreError) -> str:
    """Format a content store error for tool output."""
    if error.status_code:
        return f"Catalog unavailable [{error.status_code}]: {error.message}"
    return f"Catalog unavailable: {error.message}"


class AssistantTools:
    """Tools exposed to the shopping assistant.

    Each method returns a JSON-serializable dict with a ``success`` flag.
    """

    def __init__(self, service: CatalogService) -> None:
        """Initialize assistant tools.

        Args:
            service: Catalog service.
        """
        self.service = service

    # =========================================================================
    # Tool 1: search_products
    # =========================================================================

    async def search_products(
        self,
        query: str = "",
        category_slug: str = "",
        material: str = "",
        color: str = "",
        min_price: float = 0,
        max_price: float = 0,
        in_stock: bool = False,
    ) -> dict[str, Any]:
        """Search the catalog with every filter available.

        The query matches product names, descriptions and category titles.
        Results are ordered by name and capped at 20.

        Returns:
            Matching products and how many were returned.
        """
        filters = ProductFilter(
            category_slug=category_slug,
            color=color,
            material=material,
            min_price=min_price,
            max_price=max_price,
            search_query=query,
            in_stock=in_stock,
        )
        logger.info("Assistant search", query=query, active_filters=filters.active_keys())

        try:
            products = await self.service.assistant_search(filters)
        except ContentStoreError as e:
            return {"success": False, "error": format_error(e)}

        return {
            "success": True,
            "count": len(products),
            "products": [summarize_product(product) for product in products],
            "message": (
                f"Found {len(products)} products."
                if products
                else "No products match. Try fewer filters or a shorter search term."
            ),
        }

    # =========================================================================
    # Tool 2: get_product
    # =========================================================================

    async def get_product(self, slug: str) -> dict[str, Any]:
        """Get full details for one product.

        Args:
            slug: Product slug from search_products.

        Returns:
            Product details, or an error when the slug is unknown.
        """
        try:
            product = await self.service.get_product(slug)
        except ContentStoreError as e:
            return {"success": False, "error": format_error(e)}

        if product is None:
            return {"success": False, "error": f"No product with slug '{slug}'"}

        details = summarize_product(product)
        details["description"] = product.description
        details["featured"] = product.featured
        details["image_urls"] = [image.url for image in product.images if image.url]
        return {"success": True, "product": details}

    # =========================================================================
    # Tool 3: check_availability
    # =========================================================================

    async def check_availability(self, product_ids: list[str]) -> dict[str, Any]:
        """Check stock for products, e.g. the items in a cart.

        Args:
            product_ids: Product IDs.

        Returns:
            Stock per product and the IDs that were not found.
        """
        try:
            products = await self.service.get_cart_products(product_ids)
        except ContentStoreError as e:
            return {"success": False, "error": format_error(e)}

        found = {product.id for product in products}
        return {
            "success": True,
            "items": [
                {
                    "id": product.id,
                    "name": product.name,
                    "price": format_price(product.price),
                    "stock": product.stock,
                    "in_stock": product.in_stock,
                }
                for product in products
            ],
            "missing": [product_id for product_id in dict.fromkeys(product_ids) if product_id not in found],
        }
