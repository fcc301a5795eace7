"""Tests for product filter parameters."""

import pytest

from storefront.catalog.filters import FILTER_KEYS, ProductFilter, SortOrder
from storefront.domain.exceptions import UnknownFilterError


class TestProductFilter:
    """Tests for ProductFilter."""

    def test_default_params(self):
        """Test defaults produce the empty value for every parameter."""
        assert ProductFilter().to_params() == {
            "categorySlug": "",
            "color": "",
            "material": "",
            "minPrice": 0,
            "maxPrice": 0,
            "searchQuery": "",
            "inStock": False,
        }

    def test_params(self):
        """Test parameter names follow the query's camelCase names."""
        params = ProductFilter(
            category_slug="sofas",
            color="green",
            min_price=100,
            search_query="velvet",
            in_stock=True,
        ).to_params()

        assert params["categorySlug"] == "sofas"
        assert params["color"] == "green"
        assert params["material"] == ""
        assert params["minPrice"] == 100
        assert params["maxPrice"] == 0
        assert params["searchQuery"] == "velvet"
        assert params["inStock"] is True

    def test_has_search(self):
        """Test search detection."""
        assert ProductFilter().has_search is False
        assert ProductFilter(search_query="oak").has_search is True

    def test_is_active(self):
        """Test a key is active once it differs from its default."""
        filters = ProductFilter(color="black", max_price=500)

        assert filters.is_active("color") is True
        assert filters.is_active("price") is True
        assert filters.is_active("material") is False
        assert filters.is_active("inStock") is False

    def test_active_keys_in_sidebar_order(self):
        """Test active keys follow FILTER_KEYS order."""
        filters = ProductFilter(in_stock=True, category_slug="tables", search_query="oak")

        assert filters.active_keys() == ["category", "search", "inStock"]
        assert ProductFilter().active_keys() == []

    def test_cleared(self):
        """Test clearing one key resets only that key."""
        filters = ProductFilter(color="black", min_price=10, max_price=500)

        cleared = filters.cleared("price")

        assert cleared.min_price == 0
        assert cleared.max_price == 0
        assert cleared.color == "black"
        assert filters.min_price == 10

    def test_unknown_key(self):
        """Test unknown filter keys are rejected."""
        with pytest.raises(UnknownFilterError) as exc_info:
            ProductFilter().is_active("size")

        assert exc_info.value.details["filter_key"] == "size"
        assert exc_info.value.details["known_keys"] == list(FILTER_KEYS)

        with pytest.raises(UnknownFilterError):
            ProductFilter().cleared("size")

    def test_frozen(self):
        """Test filters are immutable."""
        with pytest.raises(AttributeError):
            ProductFilter().color = "red"  # type: ignore[misc]


class TestSortOrder:
    """Tests for SortOrder."""

    def test_values(self):
        """Test sort orders parse from their wire values."""
        assert SortOrder("name") is SortOrder.NAME
        assert SortOrder("price_asc") is SortOrder.PRICE_ASC
        assert SortOrder("price_desc") is SortOrder.PRICE_DESC
        assert SortOrder("relevance") is SortOrder.RELEVANCE

    def test_invalid(self):
        """Test unknown orders are rejected."""
        with pytest.raises(ValueError):
            SortOrder("newest")
