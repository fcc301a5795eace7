"""Tests for catalog records."""

from storefront.catalog.models import Customer, Hotspot, Product, ProductImage


class TestProduct:
    """Tests for Product."""

    def test_from_detail_document(self):
        """Test building from a full-detail projection."""
        product = Product.from_document(
            {
                "_id": "p-oak-table",
                "name": "Oak Dining Table",
                "slug": "oak-dining-table",
                "price": 899.0,
                "images": [
                    {
                        "_key": "k1",
                        "asset": {"_id": "image-1", "url": "https://cdn.example/1.jpg"},
                        "hotspot": {"x": 0.4, "y": 0.6, "height": 0.5, "width": 0.5},
                    },
                    {"_key": "k2", "asset": {"_id": "image-2", "url": "https://cdn.example/2.jpg"}},
                ],
                "category": {"_id": "cat-tables", "title": "Dining Tables", "slug": "tables"},
                "stock": 3,
                "assemblyRequired": True,
            }
        )

        assert product.id == "p-oak-table"
        assert product.category.slug == "tables"
        assert len(product.images) == 2
        assert product.primary_image.url == "https://cdn.example/1.jpg"
        assert product.primary_image.hotspot == Hotspot(x=0.4, y=0.6, height=0.5, width=0.5)
        assert product.images[1].hotspot is None
        assert product.assembly_required is True
        assert product.score is None

    def test_from_single_image_document(self):
        """Test single-image projections become a one-element image list."""
        product = Product.from_document(
            {"_id": "p1", "image": {"asset": {"_id": "image-1", "url": "https://cdn.example/1.jpg"}}}
        )

        assert len(product.images) == 1
        assert product.images[0].key is None
        assert product.primary_image.url == "https://cdn.example/1.jpg"

    def test_from_sparse_document(self):
        """Test fields a projection omits stay empty."""
        product = Product.from_document({"_id": "p1", "category": None, "images": None, "_score": 3})

        assert product.images == []
        assert product.primary_image is None
        assert product.category is None
        assert product.name is None
        assert product.score == 3

    def test_stock_helpers(self):
        """Test stock checks."""
        assert Product(id="p", stock=0).in_stock is False
        assert Product(id="p", stock=None).in_stock is False
        assert Product(id="p", stock=2).in_stock is True

        assert Product(id="p", stock=5).is_low_stock(5) is True
        assert Product(id="p", stock=6).is_low_stock(5) is False
        assert Product(id="p", stock=0).is_low_stock(5) is False
        assert Product(id="p", stock=None).is_low_stock(5) is False


class TestProductImage:
    """Tests for ProductImage."""

    def test_missing_asset(self):
        """Test images whose asset did not resolve have no URL."""
        image = ProductImage.from_document({"_key": "k1", "asset": None})

        assert image.asset is None
        assert image.url is None

    def test_hotspot_defaults(self):
        """Test partial hotspots fall back to the centred full frame."""
        image = ProductImage.from_document({"_key": "k1", "hotspot": {"x": 0.2}})

        assert image.hotspot == Hotspot(x=0.2, y=0.5, height=1.0, width=1.0)


class TestCustomer:
    """Tests for Customer."""

    def test_from_document(self):
        """Test building from the customer projection."""
        customer = Customer.from_document(
            {
                "_id": "customer-ada",
                "email": "ada@example.com",
                "name": "Ada Lovelace",
                "clerkUserId": "user_123",
                "stripeCustomerId": "cus_123",
                "createdAt": "2024-01-15T10:00:00Z",
            }
        )

        assert customer.id == "customer-ada"
        assert customer.clerk_user_id == "user_123"
        assert customer.stripe_customer_id == "cus_123"
        assert customer.created_at == "2024-01-15T10:00:00Z"
