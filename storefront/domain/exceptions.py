"""Storefront exceptions.

Errors raised by the query layer. Lookups that find nothing return None
and list queries return an empty list, so "not found" is not an exception
here; only transport failures and malformed queries are.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for all storefront exceptions.

    All storefront errors inherit from this class to allow catching
    them at the API layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize storefront error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Content Store Errors
# ============================================================================


class ContentStoreError(StorefrontError):
    """Raised when the content store is unreachable or answers with garbage."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize content store error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status returned by the content store, if any.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message, details={**(details or {}), "status_code": status_code})
        self.status_code = status_code


class ContentStoreTimeoutError(ContentStoreError):
    """Raised when a content store request times out."""

    def __init__(self, timeout: float) -> None:
        """Initialize timeout error.

        Args:
            timeout: Timeout that elapsed, in seconds.
        """
        super().__init__(
            f"Content store request timed out after {timeout}s",
            details={"timeout": timeout},
        )


# ============================================================================
# Query Errors
# ============================================================================


class QueryParameterError(StorefrontError):
    """Raised when a query references parameters that were not supplied."""

    def __init__(self, missing: list[str]) -> None:
        """Initialize query parameter error.

        Args:
            missing: Names of the parameters the query needs but did not get.
        """
        super().__init__(
            f"Missing query parameters: {', '.join('$' + name for name in missing)}",
            details={"missing": missing},
        )


class UnknownFilterError(StorefrontError):
    """Raised when a filter key does not name a product filter."""

    def __init__(self, filter_key: str, known_keys: list[str]) -> None:
        """Initialize unknown filter error.

        Args:
            filter_key: The unrecognised key.
            known_keys: Keys that are accepted.
        """
        super().__init__(
            f"Unknown filter '{filter_key}'. Known filters: {known_keys}",
            details={"filter_key": filter_key, "known_keys": known_keys},
        )
