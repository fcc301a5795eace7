"""API schemas for the storefront API.

Pydantic models for response serialization, plus converters from
catalog records.
"""

from typing import Any

from pydantic import BaseModel, Field

from storefront.catalog.models import Customer, Product, ProductImage
from storefront.catalog.service import InventoryReport
from storefront.ui.utils import format_price


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Product Schemas
# ============================================================================


class HotspotSchema(BaseModel):
    """Image focal point."""

    x: float
    y: float
    height: float
    width: float


class ImageSchema(BaseModel):
    """Product image."""

    key: str | None = Field(default=None, description="Array item key")
    asset_id: str | None = Field(default=None, description="Image asset document ID")
    url: str | None = Field(default=None, description="Resolved image URL")
    hotspot: HotspotSchema | None = None


class CategorySchema(BaseModel):
    """Category summary."""

    id: str
    title: str | None = None
    slug: str | None = None


class ProductSchema(BaseModel):
    """Product as returned by the catalog queries.

    Fields a query does not project are null.
    """

    id: str = Field(..., description="Product document ID")
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, description="Price in major currency units")
    display_price: str | None = Field(default=None, description="Formatted price, e.g. $19.50")
    images: list[ImageSchema] = Field(default_factory=list)
    category: CategorySchema | None = None
    material: str | None = None
    color: str | None = None
    dimensions: Any = None
    stock: int | None = None
    in_stock: bool | None = None
    featured: bool | None = None
    assembly_required: bool | None = None
    score: float | None = Field(default=None, description="Relevance score for searches")


class ProductListResponse(BaseModel):
    """List of products."""

    items: list[ProductSchema]
    total: int = Field(..., description="Number of products returned")


class FilterSectionSchema(BaseModel):
    """One filter section header of the product sidebar."""

    key: str
    label: str
    active: bool
    html: str


class FilterPanelResponse(BaseModel):
    """Active filters and rendered section headers."""

    active: list[str]
    sections: list[FilterSectionSchema]


class InventoryReportResponse(BaseModel):
    """Low-stock and out-of-stock products."""

    threshold: int
    low_stock: list[ProductSchema]
    out_of_stock: list[ProductSchema]
    needs_attention: bool


# ============================================================================
# Customer Schemas
# ============================================================================


class CustomerSchema(BaseModel):
    """Customer record."""

    id: str
    email: str
    name: str | None = None
    clerk_user_id: str | None = None
    stripe_customer_id: str | None = None
    created_at: str | None = None


# ============================================================================
# Converters
# ============================================================================


def image_to_schema(image: ProductImage) -> ImageSchema:
    """Convert a ProductImage to its response schema."""
    return ImageSchema(
        key=image.key,
        asset_id=image.asset.id if image.asset else None,
        url=image.url,
        hotspot=(
            HotspotSchema(
                x=image.hotspot.x,
                y=image.hotspot.y,
                height=image.hotspot.height,
                width=image.hotspot.width,
            )
            if image.hotspot
            else None
        ),
    )


def product_to_schema(product: Product) -> ProductSchema:
    """Convert a Product record to its response schema."""
    return ProductSchema(
        id=product.id,
        name=product.name,
        slug=product.slug,
        description=product.description,
        price=product.price,
        display_price=format_price(product.price) if product.price is not None else None,
        images=[image_to_schema(image) for image in product.images],
        category=(
            CategorySchema(
                id=product.category.id,
                title=product.category.title,
                slug=product.category.slug,
            )
            if product.category
            else None
        ),
        material=product.material,
        color=product.color,
        dimensions=product.dimensions,
        stock=product.stock,
        in_stock=product.in_stock if product.stock is not None else None,
        featured=product.featured,
        assembly_required=product.assembly_required,
        score=product.score,
    )


def products_to_response(products: list[Product]) -> ProductListResponse:
    """Convert a list of products to a list response."""
    return ProductListResponse(
        items=[product_to_schema(product) for product in products],
        total=len(products),
    )


def report_to_response(report: InventoryReport) -> InventoryReportResponse:
    """Convert an InventoryReport to its response schema."""
    return InventoryReportResponse(
        threshold=report.threshold,
        low_stock=[product_to_schema(product) for product in report.low_stock],
        out_of_stock=[product_to_schema(product) for product in report.out_of_stock],
        needs_attention=report.needs_attention,
    )


def customer_to_schema(customer: Customer) -> CustomerSchema:
    """Convert a Customer record to its response schema."""
    return CustomerSchema(
        id=customer.id,
        email=customer.email,
        name=customer.name,
        clerk_user_id=customer.clerk_user_id,
        stripe_customer_id=customer.stripe_customer_id,
        created_at=customer.created_at,
    )
