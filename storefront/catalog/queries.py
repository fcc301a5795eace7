"""Named product and customer queries.

Shared predicate and projection fragments are defined once and composed
into the catalog queries below. All queries are read-only.
"""

from storefront.catalog.filters import SortOrder
from storefront.catalog.groq import (
    Alias,
    And,
    ArrayElement,
    ArrayMap,
    Attr,
    Boost,
    Condition,
    Deref,
    Field,
    In,
    Literal,
    Match,
    Or,
    Param,
    Projection,
    Query,
    Score,
    asc,
    desc,
    eq,
    gt,
    gte,
    lte,
    type_is,
    unless_empty,
)

FEATURED_LIMIT = 6
FILTERED_IMAGE_LIMIT = 4
AI_SEARCH_LIMIT = 20
DEFAULT_LOW_STOCK_THRESHOLD = 5

NAME_BOOST = 3
DESCRIPTION_BOOST = 1


# ============================================================================
# Shared fragments
# ============================================================================

IS_PRODUCT = type_is("product")
IS_CUSTOMER = type_is("customer")

SEARCH_TERM = Param("searchQuery")
NAME_MATCHES = Match(Field("name"), SEARCH_TERM)
DESCRIPTION_MATCHES = Match(Field("description"), SEARCH_TERM)
CATEGORY_TITLE_MATCHES = Match(Field("category->title"), SEARCH_TERM)


def _attribute_filters() -> list[Condition]:
    """Optional category, color, material and price clauses."""
    return [
        unless_empty("categorySlug", "", eq("category->slug.current", Param("categorySlug"))),
        unless_empty("color", "", eq("color", Param("color"))),
        unless_empty("material", "", eq("material", Param("material"))),
        unless_empty("minPrice", 0, gte("price", Param("minPrice"))),
        unless_empty("maxPrice", 0, lte("price", Param("maxPrice"))),
    ]


IN_STOCK_FILTER = unless_empty("inStock", False, gt("stock", Literal(0)))

# Shared by every filtered listing so all orderings filter identically.
PRODUCT_FILTER = And(
    IS_PRODUCT,
    *_attribute_filters(),
    unless_empty("searchQuery", "", Or(NAME_MATCHES, DESCRIPTION_MATCHES)),
    IN_STOCK_FILTER,
)

RELEVANCE_SCORE = Score(
    (
        Boost(NAME_MATCHES, NAME_BOOST),
        Boost(DESCRIPTION_MATCHES, DESCRIPTION_BOOST),
    )
)

IMAGE_ASSET = Deref("asset", Projection(Attr("_id"), Attr("url")))

CATEGORY = Deref(
    "category",
    Projection(Attr("_id"), Attr("title"), Alias("slug", "slug.current")),
)

GALLERY_IMAGES = ArrayMap(
    "images",
    "images",
    Projection(Attr("_key"), IMAGE_ASSET, Attr("hotspot")),
)

PREVIEW_IMAGES = ArrayMap(
    "images",
    "images",
    Projection(Attr("_key"), IMAGE_ASSET),
    start=0,
    stop=FILTERED_IMAGE_LIMIT,
)

PRIMARY_IMAGE = ArrayElement("image", "images", 0, Projection(IMAGE_ASSET, Attr("hotspot")))
PRIMARY_IMAGE_ASSET = ArrayElement("image", "images", 0, Projection(IMAGE_ASSET))

SLUG = Alias("slug", "slug.current")

PRODUCT_DETAIL_PROJECTION = Projection(
    Attr("_id"),
    Attr("name"),
    SLUG,
    Attr("description"),
    Attr("price"),
    GALLERY_IMAGES,
    CATEGORY,
    Attr("material"),
    Attr("color"),
    Attr("dimensions"),
    Attr("stock"),
    Attr("featured"),
    Attr("assemblyRequired"),
)

PRODUCT_CARD_PROJECTION = Projection(
    Attr("_id"),
    Attr("name"),
    SLUG,
    Attr("price"),
    PRIMARY_IMAGE,
    CATEGORY,
    Attr("material"),
    Attr("color"),
    Attr("stock"),
)

FILTERED_PRODUCT_PROJECTION = Projection(
    Attr("_id"),
    Attr("name"),
    SLUG,
    Attr("price"),
    PREVIEW_IMAGES,
    CATEGORY,
    Attr("material"),
    Attr("color"),
    Attr("stock"),
)

CUSTOMER_PROJECTION = Projection(
    Attr("_id"),
    Attr("email"),
    Attr("name"),
    Attr("clerkUserId"),
    Attr("stripeCustomerId"),
    Attr("createdAt"),
)


# ============================================================================
# Product queries
# ============================================================================

# Every product, full detail, for the landing page grid.
ALL_PRODUCTS_QUERY = Query(
    filter=IS_PRODUCT,
    projection=PRODUCT_DETAIL_PROJECTION,
    order=(asc("name"),),
)

# Featured and in stock, for the homepage carousel.
FEATURED_PRODUCTS_QUERY = Query(
    filter=And(IS_PRODUCT, eq("featured", Literal(True)), gt("stock", Literal(0))),
    projection=Projection(
        Attr("_id"),
        Attr("name"),
        SLUG,
        Attr("description"),
        Attr("price"),
        GALLERY_IMAGES,
        CATEGORY,
        Attr("stock"),
    ),
    order=(asc("name"),),
    limit=(0, FEATURED_LIMIT),
)

PRODUCTS_BY_CATEGORY_QUERY = Query(
    filter=And(IS_PRODUCT, eq("category->slug.current", Param("categorySlug"))),
    projection=PRODUCT_CARD_PROJECTION,
    order=(asc("name"),),
)

PRODUCT_BY_SLUG_QUERY = Query(
    filter=And(IS_PRODUCT, eq("slug.current", Param("slug"))),
    projection=PRODUCT_DETAIL_PROJECTION,
    single=True,
)

# Relevance search without other filters; an empty term matches everything.
SEARCH_PRODUCTS_QUERY = Query(
    filter=And(
        IS_PRODUCT,
        Or(eq(SEARCH_TERM, Literal("")), NAME_MATCHES, DESCRIPTION_MATCHES),
    ),
    projection=Projection(
        Attr("_id"),
        Attr("_score"),
        *PRODUCT_CARD_PROJECTION.selections[1:],
    ),
    score=RELEVANCE_SCORE,
    order=(desc("_score"),),
)

_FILTERED = Query(filter=PRODUCT_FILTER, projection=FILTERED_PRODUCT_PROJECTION)

FILTERED_PRODUCTS_QUERIES: dict[SortOrder, Query] = {
    SortOrder.NAME: _FILTERED.ordered(asc("name")),
    SortOrder.PRICE_ASC: _FILTERED.ordered(asc("price")),
    SortOrder.PRICE_DESC: _FILTERED.ordered(desc("price")),
    SortOrder.RELEVANCE: Query(
        filter=PRODUCT_FILTER,
        projection=FILTERED_PRODUCT_PROJECTION,
        score=RELEVANCE_SCORE,
        order=(desc("_score"), asc("name")),
    ),
}

# Cart and checkout resolution; no ordering guarantee.
PRODUCTS_BY_IDS_QUERY = Query(
    filter=And(IS_PRODUCT, In(Field("_id"), Param("ids"))),
    projection=Projection(
        Attr("_id"),
        Attr("name"),
        SLUG,
        Attr("price"),
        PRIMARY_IMAGE,
        Attr("stock"),
    ),
)

OUT_OF_STOCK_PRODUCTS_QUERY = Query(
    filter=And(IS_PRODUCT, eq("stock", Literal(0))),
    projection=Projection(Attr("_id"), Attr("name"), SLUG, PRIMARY_IMAGE_ASSET),
    order=(asc("name"),),
)

# Conversational assistant search: every filter plus category title matching,
# ordered by name and capped so answers stay small and deterministic.
AI_SEARCH_PRODUCTS_QUERY = Query(
    filter=And(
        IS_PRODUCT,
        unless_empty(
            "searchQuery",
            "",
            Or(NAME_MATCHES, DESCRIPTION_MATCHES, CATEGORY_TITLE_MATCHES),
        ),
        *_attribute_filters(),
        IN_STOCK_FILTER,
    ),
    projection=Projection(
        Attr("_id"),
        Attr("name"),
        SLUG,
        Attr("description"),
        Attr("price"),
        PRIMARY_IMAGE_ASSET,
        CATEGORY,
        Attr("material"),
        Attr("color"),
        Attr("dimensions"),
        Attr("stock"),
        Attr("featured"),
        Attr("assemblyRequired"),
    ),
    order=(asc("name"),),
    limit=(0, AI_SEARCH_LIMIT),
)


def build_low_stock_query(threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> Query:
    """Build the low-stock report query.

    Args:
        threshold: Highest stock level still reported as low.

    Returns:
        Query for products with 0 < stock <= threshold, lowest stock first.
    """
    return Query(
        filter=And(IS_PRODUCT, gt("stock", Literal(0)), lte("stock", Literal(threshold))),
        projection=Projection(
            Attr("_id"),
            Attr("name"),
            SLUG,
            Attr("stock"),
            PRIMARY_IMAGE_ASSET,
        ),
        order=(asc("stock"),),
    )


# ============================================================================
# Customer queries
# ============================================================================

CUSTOMER_BY_EMAIL_QUERY = Query(
    filter=And(IS_CUSTOMER, eq("email", Param("email"))),
    projection=CUSTOMER_PROJECTION,
    single=True,
)

CUSTOMER_BY_STRIPE_ID_QUERY = Query(
    filter=And(IS_CUSTOMER, eq("stripeCustomerId", Param("stripeCustomerId"))),
    projection=CUSTOMER_PROJECTION,
    single=True,
)
