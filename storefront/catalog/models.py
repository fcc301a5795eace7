"""Records returned by the catalog queries.

Plain dataclasses built from projected content-store documents. Each
query projects a different subset of fields, so everything except the
identifier is optional.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ImageAsset:
    """Resolved image asset."""

    id: str | None
    url: str | None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "ImageAsset":
        return cls(id=data.get("_id"), url=data.get("url"))


@dataclass
class Hotspot:
    """Focal point of an image, in relative coordinates."""

    x: float
    y: float
    height: float
    width: float

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Hotspot":
        return cls(
            x=data.get("x", 0.5),
            y=data.get("y", 0.5),
            height=data.get("height", 1.0),
            width=data.get("width", 1.0),
        )


@dataclass
class ProductImage:
    """Product image with its asset and optional hotspot."""

    key: str | None
    asset: ImageAsset | None
    hotspot: Hotspot | None = None

    @property
    def url(self) -> str | None:
        return self.asset.url if self.asset else None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "ProductImage":
        asset = data.get("asset")
        hotspot = data.get("hotspot")
        return cls(
            key=data.get("_key"),
            asset=ImageAsset.from_document(asset) if asset else None,
            hotspot=Hotspot.from_document(hotspot) if hotspot else None,
        )


@dataclass
class Category:
    """Category a product belongs to."""

    id: str
    title: str | None
    slug: str | None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Category":
        return cls(id=data["_id"], title=data.get("title"), slug=data.get("slug"))


@dataclass
class Product:
    """Product as returned by one of the catalog projections.

    Attributes:
        id: Document ID.
        name: Product name.
        slug: URL-safe key.
        price: Price in major currency units.
        description: Long description.
        images: Images in display order (one element for single-image projections).
        category: Category, if the product has one and the projection includes it.
        material: Material.
        color: Color.
        dimensions: Free-form dimensions.
        stock: Units in stock.
        featured: Shown in the homepage carousel.
        assembly_required: Needs assembly.
        score: Relevance score, for scored queries.
    """

    id: str
    name: str | None = None
    slug: str | None = None
    price: float | None = None
    description: str | None = None
    images: list[ProductImage] = field(default_factory=list)
    category: Category | None = None
    material: str | None = None
    color: str | None = None
    dimensions: Any = None
    stock: int | None = None
    featured: bool | None = None
    assembly_required: bool | None = None
    score: float | None = None

    @property
    def primary_image(self) -> ProductImage | None:
        return self.images[0] if self.images else None

    @property
    def in_stock(self) -> bool:
        return (self.stock or 0) > 0

    def is_low_stock(self, threshold: int) -> bool:
        """Check whether stock is positive but at or below the threshold."""
        return self.stock is not None and 0 < self.stock <= threshold

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Product":
        """Create from a projected product document.

        Args:
            data: Projected document.

        Returns:
            Product instance.
        """
        raw_images = data.get("images")
        if raw_images is None and data.get("image"):
            raw_images = [data["image"]]
        category = data.get("category")
        return cls(
            id=data["_id"],
            name=data.get("name"),
            slug=data.get("slug"),
            price=data.get("price"),
            description=data.get("description"),
            images=[ProductImage.from_document(image) for image in raw_images or []],
            category=Category.from_document(category) if category else None,
            material=data.get("material"),
            color=data.get("color"),
            dimensions=data.get("dimensions"),
            stock=data.get("stock"),
            featured=data.get("featured"),
            assembly_required=data.get("assemblyRequired"),
            score=data.get("_score"),
        )


@dataclass
class Customer:
    """Customer record with its auth and billing provider IDs."""

    id: str
    email: str
    name: str | None = None
    clerk_user_id: str | None = None
    stripe_customer_id: str | None = None
    created_at: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Customer":
        return cls(
            id=data["_id"],
            email=data["email"],
            name=data.get("name"),
            clerk_user_id=data.get("clerkUserId"),
            stripe_customer_id=data.get("stripeCustomerId"),
            created_at=data.get("createdAt"),
        )
