"""Shared fixtures: a small furniture dataset in Sanity export shape."""

from typing import Any

import pytest

from storefront.catalog.service import CatalogService
from storefront.domain.exceptions import ContentStoreError
from storefront.infrastructure.memory_store import InMemoryDocumentStore


def _ref(document_id: str) -> dict[str, str]:
    return {"_type": "reference", "_ref": document_id}


def _image(key: str, asset_id: str, hotspot: dict[str, float] | None = None) -> dict[str, Any]:
    image: dict[str, Any] = {"_key": key, "_type": "image", "asset": _ref(asset_id)}
    if hotspot:
        image["hotspot"] = hotspot
    return image


def _asset(asset_id: str) -> dict[str, Any]:
    return {
        "_id": asset_id,
        "_type": "sanity.imageAsset",
        "url": f"https://cdn.sanity.io/images/demo/production/{asset_id}.jpg",
    }


def _category(category_id: str, title: str, slug: str) -> dict[str, Any]:
    return {
        "_id": category_id,
        "_type": "category",
        "title": title,
        "slug": {"_type": "slug", "current": slug},
    }


def _product(
    product_id: str,
    name: str,
    slug: str,
    description: str,
    price: float,
    category_id: str,
    material: str,
    color: str,
    stock: int,
    featured: bool = False,
    images: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "_id": product_id,
        "_type": "product",
        "name": name,
        "slug": {"_type": "slug", "current": slug},
        "description": description,
        "price": price,
        "category": _ref(category_id),
        "material": material,
        "color": color,
        "stock": stock,
        "featured": featured,
        "images": images or [],
        **extra,
    }


def make_documents() -> list[dict[str, Any]]:
    """Build a fresh copy of the sample dataset.

    Products, by name:
        Bar Stool            89    chairs  metal    black    stock 1
        Desk Chair           249   chairs  metal    black    stock 40, featured, 5 images
        Leather Sofa         1899  sofas   leather  brown    stock 5
        Oak Dining Table     899   tables  wood     natural  stock 3, featured
        Velvet Sofa          1299  sofas   fabric   green    stock 12, featured
        Walnut Coffee Table  349   tables  wood     brown    stock 0, featured
    """
    return [
        _category("cat-tables", "Dining Tables", "tables"),
        _category("cat-sofas", "Sofas", "sofas"),
        _category("cat-chairs", "Chairs", "chairs"),
        *[_asset(f"image-{name}") for name in ("oak-1", "oak-2", "walnut", "velvet", "leather")],
        *[_asset(f"image-chair-{n}") for n in range(1, 6)],
        _product(
            "p-oak-table",
            "Oak Dining Table",
            "oak-dining-table",
            "Solid oak table that seats six.",
            899.0,
            "cat-tables",
            "wood",
            "natural",
            3,
            featured=True,
            images=[
                _image("k-oak-1", "image-oak-1", {"x": 0.4, "y": 0.6, "height": 0.5, "width": 0.5}),
                _image("k-oak-2", "image-oak-2"),
            ],
            dimensions="180 x 90 x 75 cm",
            assemblyRequired=True,
        ),
        _product(
            "p-walnut-table",
            "Walnut Coffee Table",
            "walnut-coffee-table",
            "Low walnut surface for the living room.",
            349.0,
            "cat-tables",
            "wood",
            "brown",
            0,
            featured=True,
            images=[_image("k-walnut", "image-walnut")],
        ),
        _product(
            "p-velvet-sofa",
            "Velvet Sofa",
            "velvet-sofa",
            "Deep seats and a matching side table.",
            1299.0,
            "cat-sofas",
            "fabric",
            "green",
            12,
            featured=True,
            images=[_image("k-velvet", "image-velvet")],
        ),
        _product(
            "p-leather-sofa",
            "Leather Sofa",
            "leather-sofa",
            "Full-grain leather that ages beautifully.",
            1899.0,
            "cat-sofas",
            "leather",
            "brown",
            5,
            images=[_image("k-leather", "image-leather")],
        ),
        _product(
            "p-desk-chair",
            "Desk Chair",
            "desk-chair",
            "Ergonomic office chair with lumbar support.",
            249.0,
            "cat-chairs",
            "metal",
            "black",
            40,
            featured=True,
            images=[_image(f"k-chair-{n}", f"image-chair-{n}") for n in range(1, 6)],
        ),
        _product(
            "p-stool",
            "Bar Stool",
            "bar-stool",
            "Counter-height stool.",
            89.0,
            "cat-chairs",
            "metal",
            "black",
            1,
        ),
        _product(
            "drafts.p-oak-table",
            "Oak Dining Table (draft)",
            "oak-dining-table",
            "Unpublished edit.",
            799.0,
            "cat-tables",
            "wood",
            "natural",
            3,
        ),
        {
            "_id": "customer-ada",
            "_type": "customer",
            "email": "ada@example.com",
            "name": "Ada Lovelace",
            "clerkUserId": "user_123",
            "stripeCustomerId": "cus_123",
            "createdAt": "2024-01-15T10:00:00Z",
        },
    ]


class FailingStore:
    """Content store whose every query fails with the given error."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.closed = False

    async def fetch(self, query, params=None):
        raise self.error

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def documents() -> list[dict[str, Any]]:
    """Sample dataset."""
    return make_documents()


@pytest.fixture
def memory_store(documents) -> InMemoryDocumentStore:
    """In-memory store loaded with the sample dataset."""
    return InMemoryDocumentStore(documents)


@pytest.fixture
def service(memory_store) -> CatalogService:
    """Catalog service over the sample dataset."""
    return CatalogService(memory_store, low_stock_threshold=5)


@pytest.fixture
def failing_store() -> FailingStore:
    """Store that fails like an unreachable Sanity project."""
    return FailingStore(ContentStoreError("Service unavailable", status_code=503))
