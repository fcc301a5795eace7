"""Catalog service for product operations.

High-level service over the product repository: picks the listing order,
resolves cart contents and assembles the inventory report.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from storefront.catalog.filters import ProductFilter, SortOrder
from storefront.catalog.models import Product
from storefront.catalog.queries import DEFAULT_LOW_STOCK_THRESHOLD
from storefront.catalog.repository import ProductRepository

if TYPE_CHECKING:
    from storefront.infrastructure.content_store import ContentStore

logger = structlog.get_logger()


@dataclass
class InventoryReport:
    """Stock report for the admin dashboard.

    Attributes:
        threshold: Highest stock level counted as low.
        low_stock: Products with 0 < stock <= threshold, lowest first.
        out_of_stock: Products with no stock, by name.
    """

    threshold: int
    low_stock: list[Product]
    out_of_stock: list[Product]

    @property
    def needs_attention(self) -> bool:
        return bool(self.low_stock or self.out_of_stock)


def resolve_sort(filters: ProductFilter, sort: SortOrder | None = None) -> SortOrder:
    """Pick the listing order.

    An explicit order wins; otherwise searches are ranked by relevance and
    plain listings are ordered by name.
    """
    if sort is not None:
        return SortOrder(sort)
    return SortOrder.RELEVANCE if filters.has_search else SortOrder.NAME


class CatalogService:
    """Service for catalog operations.

    Example usage:
        service = CatalogService(get_content_store(), low_stock_threshold=5)
        products = await service.browse(ProductFilter(search_query="sofa"))
        report = await service.inventory_report()
    """

    def __init__(
        self,
        store: "ContentStore",
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> None:
        """Initialize service with a content store.

        Args:
            store: Content store to query.
            low_stock_threshold: Highest stock level reported as low.
        """
        self.repository = ProductRepository(store, low_stock_threshold)

    @property
    def low_stock_threshold(self) -> int:
        return self.repository.low_stock_threshold

    async def list_all(self) -> list[Product]:
        return await self.repository.find_all()

    async def featured(self) -> list[Product]:
        return await self.repository.find_featured()

    async def by_category(self, category_slug: str) -> list[Product]:
        return await self.repository.find_by_category(category_slug)

    async def get_product(self, slug: str) -> Product | None:
        """Get product by slug.

        Args:
            slug: Product slug.

        Returns:
            Product if found.
        """
        product = await self.repository.get_by_slug(slug)
        if product is None:
            logger.info("Product not found", slug=slug)
        return product

    async def search(self, search_query: str) -> list[Product]:
        return await self.repository.search(search_query)

    async def browse(
        self,
        filters: ProductFilter,
        sort: SortOrder | None = None,
    ) -> list[Product]:
        """List products matching filters.

        Args:
            filters: Filter parameters.
            sort: Result ordering; chosen by resolve_sort when omitted.

        Returns:
            Matching products in order.
        """
        order = resolve_sort(filters, sort)
        products = await self.repository.find_filtered(filters, order)
        logger.debug(
            "Browsed products",
            active_filters=filters.active_keys(),
            sort=order.value,
            count=len(products),
        )
        return products

    async def get_cart_products(self, ids: Sequence[str]) -> list[Product]:
        """Resolve the products referenced by a cart.

        Duplicate IDs are collapsed and unknown IDs are skipped. An empty
        cart does not touch the content store.

        Args:
            ids: Product IDs from the cart.

        Returns:
            Products found, in no particular order.
        """
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []
        products = await self.repository.get_by_ids(unique_ids)
        if len(products) < len(unique_ids):
            found = {product.id for product in products}
            logger.warning(
                "Cart references unknown products",
                missing=[product_id for product_id in unique_ids if product_id not in found],
            )
        return products

    async def low_stock(self) -> list[Product]:
        return await self.repository.find_low_stock()

    async def out_of_stock(self) -> list[Product]:
        return await self.repository.find_out_of_stock()

    async def inventory_report(self) -> InventoryReport:
        """Build the stock report, running both queries concurrently."""
        low_stock, out_of_stock = await asyncio.gather(
            self.repository.find_low_stock(),
            self.repository.find_out_of_stock(),
        )
        return InventoryReport(
            threshold=self.low_stock_threshold,
            low_stock=low_stock,
            out_of_stock=out_of_stock,
        )

    async def assistant_search(self, filters: ProductFilter) -> list[Product]:
        """Search for the shopping assistant (name order, at most 20)."""
        return await self.repository.assistant_search(filters)
