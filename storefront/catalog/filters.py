"""Product filter parameters and result orderings.

Every filter follows the "empty value disables the clause" convention:
an empty string, a zero price bound or ``in_stock=False`` means the
corresponding clause is not applied.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

from storefront.domain.exceptions import UnknownFilterError


class SortOrder(str, Enum):
    """Orderings available for filtered product listings."""

    NAME = "name"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RELEVANCE = "relevance"


# UI filter key -> ProductFilter attributes it controls
FILTER_KEYS: dict[str, tuple[str, ...]] = {
    "category": ("category_slug",),
    "color": ("color",),
    "material": ("material",),
    "price": ("min_price", "max_price"),
    "search": ("search_query",),
    "inStock": ("in_stock",),
}


@dataclass(frozen=True)
class ProductFilter:
    """Filter parameters for product listings.

    Attributes:
        category_slug: Only products in the category with this slug.
        color: Exact color.
        material: Exact material.
        min_price: Minimum price, inclusive (0 disables).
        max_price: Maximum price, inclusive (0 disables).
        search_query: Prefix search over name and description.
        in_stock: Only products with stock > 0.
    """

    category_slug: str = ""
    color: str = ""
    material: str = ""
    min_price: float = 0
    max_price: float = 0
    search_query: str = ""
    in_stock: bool = False

    def to_params(self) -> dict[str, Any]:
        """Build the full GROQ parameter set.

        Every parameter is always present since the query text references
        all of them.

        Returns:
            Parameter dictionary keyed by GROQ parameter name.
        """
        return {
            "categorySlug": self.category_slug,
            "color": self.color,
            "material": self.material,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "searchQuery": self.search_query,
            "inStock": self.in_stock,
        }

    @property
    def has_search(self) -> bool:
        return self.search_query != ""

    def is_active(self, filter_key: str) -> bool:
        """Check whether a filter differs from its default.

        Args:
            filter_key: UI filter key (see FILTER_KEYS).

        Returns:
            True if any attribute behind the key is non-default.

        Raises:
            UnknownFilterError: If the key is not a known filter.
        """
        defaults = _defaults()
        return any(
            getattr(self, attribute) != defaults[attribute]
            for attribute in _attributes_for(filter_key)
        )

    def active_keys(self) -> list[str]:
        """List the filter keys that are currently applied."""
        return [key for key in FILTER_KEYS if self.is_active(key)]

    def cleared(self, filter_key: str) -> "ProductFilter":
        """Return a copy with one filter reset to its default.

        Args:
            filter_key: UI filter key to clear.

        Returns:
            New ProductFilter.

        Raises:
            UnknownFilterError: If the key is not a known filter.
        """
        defaults = _defaults()
        return replace(
            self,
            **{attribute: defaults[attribute] for attribute in _attributes_for(filter_key)},
        )


def _defaults() -> dict[str, Any]:
    return {f.name: f.default for f in fields(ProductFilter)}


def _attributes_for(filter_key: str) -> tuple[str, ...]:
    try:
        return FILTER_KEYS[filter_key]
    except KeyError:
        raise UnknownFilterError(filter_key, list(FILTER_KEYS)) from None
