"""Product and customer repositories.

One method per catalog query. Repositories only read: they pick the
query, supply its parameters and turn projected documents into records.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from storefront.catalog.filters import ProductFilter, SortOrder
from storefront.catalog.models import Customer, Product
from storefront.catalog.queries import (
    AI_SEARCH_PRODUCTS_QUERY,
    ALL_PRODUCTS_QUERY,
    CUSTOMER_BY_EMAIL_QUERY,
    CUSTOMER_BY_STRIPE_ID_QUERY,
    DEFAULT_LOW_STOCK_THRESHOLD,
    FEATURED_PRODUCTS_QUERY,
    FILTERED_PRODUCTS_QUERIES,
    OUT_OF_STOCK_PRODUCTS_QUERY,
    PRODUCT_BY_SLUG_QUERY,
    PRODUCTS_BY_CATEGORY_QUERY,
    PRODUCTS_BY_IDS_QUERY,
    SEARCH_PRODUCTS_QUERY,
    build_low_stock_query,
)

if TYPE_CHECKING:
    from storefront.catalog.groq import Query
    from storefront.infrastructure.content_store import ContentStore


class ProductRepository:
    """Repository for product queries.

    Example usage:
        repo = ProductRepository(get_content_store(), low_stock_threshold=5)
        products = await repo.find_filtered(
            ProductFilter(color="oak", in_stock=True),
            SortOrder.PRICE_ASC,
        )
    """

    def __init__(
        self,
        store: "ContentStore",
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> None:
        """Initialize repository.

        Args:
            store: Content store to query.
            low_stock_threshold: Highest stock level reported as low.
        """
        self.store = store
        self.low_stock_threshold = low_stock_threshold
        self._low_stock_query = build_low_stock_query(low_stock_threshold)

    async def _fetch_list(self, query: "Query", params: dict[str, Any] | None = None) -> list[Product]:
        result = await self.store.fetch(query, params or {})
        return [Product.from_document(document) for document in result or []]

    async def find_all(self) -> list[Product]:
        """Get every product, ordered by name."""
        return await self._fetch_list(ALL_PRODUCTS_QUERY)

    async def find_featured(self) -> list[Product]:
        """Get up to six featured, in-stock products ordered by name."""
        return await self._fetch_list(FEATURED_PRODUCTS_QUERY)

    async def find_by_category(self, category_slug: str) -> list[Product]:
        """Get products in a category, ordered by name.

        Args:
            category_slug: Category slug.

        Returns:
            Products with their primary image only.
        """
        return await self._fetch_list(PRODUCTS_BY_CATEGORY_QUERY, {"categorySlug": category_slug})

    async def get_by_slug(self, slug: str) -> Product | None:
        """Get a product by slug.

        Args:
            slug: Product slug.

        Returns:
            Product if found, None otherwise.
        """
        document = await self.store.fetch(PRODUCT_BY_SLUG_QUERY, {"slug": slug})
        return Product.from_document(document) if document else None

    async def search(self, search_query: str) -> list[Product]:
        """Search name and description, most relevant first.

        Name matches weigh three times as much as description matches.

        Args:
            search_query: Search term, matched as a word prefix.

        Returns:
            Products with their relevance score.
        """
        return await self._fetch_list(SEARCH_PRODUCTS_QUERY, {"searchQuery": search_query})

    async def find_filtered(
        self,
        filters: ProductFilter,
        sort: SortOrder = SortOrder.NAME,
    ) -> list[Product]:
        """Get products matching the filters in the requested order.

        Args:
            filters: Filter parameters.
            sort: Result ordering.

        Returns:
            Products with up to four preview images each.
        """
        query = FILTERED_PRODUCTS_QUERIES[SortOrder(sort)]
        return await self._fetch_list(query, filters.to_params())

    async def get_by_ids(self, ids: Sequence[str]) -> list[Product]:
        """Get the products whose IDs are listed.

        Unknown IDs are skipped; no ordering is guaranteed.

        Args:
            ids: Product IDs.

        Returns:
            Matching products.
        """
        return await self._fetch_list(PRODUCTS_BY_IDS_QUERY, {"ids": list(ids)})

    async def find_low_stock(self) -> list[Product]:
        """Get products with 0 < stock <= threshold, lowest stock first."""
        return await self._fetch_list(self._low_stock_query)

    async def find_out_of_stock(self) -> list[Product]:
        """Get products with no stock, ordered by name."""
        return await self._fetch_list(OUT_OF_STOCK_PRODUCTS_QUERY)

    async def assistant_search(self, filters: ProductFilter) -> list[Product]:
        """Search for the shopping assistant.

        Applies every filter, also matches the search term against the
        category title, orders by name and returns at most 20 products.

        Args:
            filters: Filter parameters.

        Returns:
            Products with full detail and their primary image.
        """
        return await self._fetch_list(AI_SEARCH_PRODUCTS_QUERY, filters.to_params())


class CustomerRepository:
    """Repository for customer lookups."""

    def __init__(self, store: "ContentStore") -> None:
        """Initialize repository.

        Args:
            store: Content store to query.
        """
        self.store = store

    async def get_by_email(self, email: str) -> Customer | None:
        """Get a customer by email.

        Args:
            email: Customer email.

        Returns:
            Customer if found, None otherwise.
        """
        document = await self.store.fetch(CUSTOMER_BY_EMAIL_QUERY, {"email": email})
        return Customer.from_document(document) if document else None

    async def get_by_stripe_id(self, stripe_customer_id: str) -> Customer | None:
        """Get a customer by Stripe customer ID.

        Args:
            stripe_customer_id: Stripe customer ID.

        Returns:
            Customer if found, None otherwise.
        """
        document = await self.store.fetch(
            CUSTOMER_BY_STRIPE_ID_QUERY,
            {"stripeCustomerId": stripe_customer_id},
        )
        return Customer.from_document(document) if document else None
