"""Domain layer - errors shared by the catalog and notification services.

Example usage:
    from app.domain import NotFoundProductError

    try:
        product = await service.get_detail(999)
    except NotFoundProductError as e:
        print(e.error_code)  # PRODUCT_NOT_FOUND
"""

from app.domain.exceptions import (
    CatalogError,
    DomainError,
    InvalidFilterError,
    NotFoundCategoryError,
    NotFoundCategoryFilterError,
    NotFoundProductError,
)

__all__ = [
    "CatalogError",
    "DomainError",
    "InvalidFilterError",
    "NotFoundCategoryError",
    "NotFoundCategoryFilterError",
    "NotFoundProductError",
]
