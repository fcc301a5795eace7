"""Domain layer - storefront error taxonomy."""

from storefront.domain.exceptions import (
    ContentStoreError,
    ContentStoreTimeoutError,
    QueryParameterError,
    StorefrontError,
    UnknownFilterError,
)

__all__ = [
    "StorefrontError",
    "ContentStoreError",
    "ContentStoreTimeoutError",
    "QueryParameterError",
    "UnknownFilterError",
]
