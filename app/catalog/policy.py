"""Sort policy for category filters.

Maps a client-supplied filter token to a single-field sort order.
"""

from dataclasses import dataclass
from enum import Enum

from app.domain.exceptions import NotFoundCategoryFilterError


class SortField(str, Enum):
    """Product columns a listing can be sorted by."""

    DISCOUNT_RATE = "discount_rate"
    CURRENT_PRICE = "current_price"


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class FilterToken(str, Enum):
    """Recognized category filter tokens."""

    DISCOUNT_RATE_DESC = "discountRate_desc"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


@dataclass(frozen=True)
class SortSpec:
    """A (field, direction) sort specification."""

    field: SortField
    direction: SortDirection


SORT_POLICY: dict[FilterToken, SortSpec] = {
    FilterToken.DISCOUNT_RATE_DESC: SortSpec(SortField.DISCOUNT_RATE, SortDirection.DESC),
    FilterToken.PRICE_ASC: SortSpec(SortField.CURRENT_PRICE, SortDirection.ASC),
    FilterToken.PRICE_DESC: SortSpec(SortField.CURRENT_PRICE, SortDirection.DESC),
}


def resolve_sort(token: str) -> SortSpec:
    """Resolve a filter token to its sort specification.

    Args:
        token: Filter token, matched exactly (case-sensitive).

    Returns:
        The sort specification for the token.

    Raises:
        NotFoundCategoryFilterError: If the token is not recognized.
    """
    try:
        return SORT_POLICY[FilterToken(token)]
    except ValueError:
        raise NotFoundCategoryFilterError(token) from None
