"""Domain exceptions.

All domain-level errors that represent business rule violations.
These exceptions are raised by the catalog and notification services
when a lookup or validation fails. None of them are transient.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API layer.

    Attributes:
        error_code: Machine-readable code used in error responses.
        status_code: HTTP status the API layer maps this error to.
    """

    error_code = "DOMAIN_ERROR"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(DomainError):
    """Base class for catalog lookup errors."""

    status_code = 404


class NotFoundCategoryError(CatalogError):
    """Raised when a referenced category name does not exist."""

    error_code = "CATEGORY_NOT_FOUND"

    def __init__(self, category_name: str) -> None:
        """Initialize category not found error.

        Args:
            category_name: The category name that was looked up.
        """
        super().__init__(
            f"Category not found: {category_name}",
            details={"category_name": category_name},
        )


class NotFoundCategoryFilterError(CatalogError):
    """Raised when a filter token is not one of the known sort filters."""

    error_code = "CATEGORY_FILTER_NOT_FOUND"

    def __init__(self, filter_token: str) -> None:
        """Initialize category filter not found error.

        Args:
            filter_token: The unrecognized filter token.
        """
        super().__init__(
            f"Unknown category filter: {filter_token}",
            details={"filter": filter_token},
        )


InvalidFilterError = NotFoundCategoryFilterError


class NotFoundProductError(CatalogError):
    """Raised when a product lookup or a scoped listing yields nothing."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int | None = None) -> None:
        """Initialize product not found error.

        Args:
            product_id: The product ID for direct lookups, None for listings.
        """
        if product_id is None:
            message = "No products found"
            details: dict[str, Any] = {}
        else:
            message = f"Product not found: {product_id}"
            details = {"product_id": product_id}
        super().__init__(message, details=details)
