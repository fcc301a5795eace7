"""Product Catalog.

Typed GROQ queries over the storefront's content store: filtering,
relevance search, stock reports and customer lookups.
"""

from storefront.catalog.filters import FILTER_KEYS, ProductFilter, SortOrder
from storefront.catalog.models import Category, Customer, ImageAsset, Product, ProductImage
from storefront.catalog.repository import CustomerRepository, ProductRepository
from storefront.catalog.service import CatalogService, InventoryReport, resolve_sort

__all__ = [
    # Filters
    "FILTER_KEYS",
    "ProductFilter",
    "SortOrder",
    # Models
    "Category",
    "Customer",
    "ImageAsset",
    "Product",
    "ProductImage",
    # Repositories
    "CustomerRepository",
    "ProductRepository",
    # Service
    "CatalogService",
    "InventoryReport",
    "resolve_sort",
]
