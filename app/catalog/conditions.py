"""Query conditions for product listings.

A Condition is an immutable AND of small tagged clauses. Building one
never touches the database; ProductRepository compiles it into a
SQLAlchemy expression.

Example usage:
    condition = build_condition("shoes", StockVisibility.HIDE_OUT_OF_STOCK)
    condition.clauses
    # (InCategory(name='shoes'), DiscountNotNull(), StockStatus(is_out_of_stock=False))
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class StockVisibility(str, Enum):
    """Whether sold-out products are included in a listing."""

    SHOW_ALL = "show_all"
    HIDE_OUT_OF_STOCK = "hide_out_of_stock"

    @classmethod
    def from_query(cls, raw: str | None) -> "StockVisibility":
        """Coerce the raw ``isOutOfStock`` query value.

        Only the literal string "false" hides sold-out products. Absent,
        "true" and any other value show everything, so "False" or "0" from a
        client silently keeps sold-out products in the listing.

        Args:
            raw: Raw query string value, or None when absent.

        Returns:
            The stock visibility to apply.
        """
        if raw == "false":
            return cls.HIDE_OUT_OF_STOCK
        return cls.SHOW_ALL


# ============================================================================
# Clauses
# ============================================================================


@dataclass(frozen=True)
class InCategory:
    """Product belongs to the named category."""

    name: str


@dataclass(frozen=True)
class StockStatus:
    """Product stock flag equals the given value."""

    is_out_of_stock: bool


@dataclass(frozen=True)
class DiscountNotNull:
    """Product has a discount rate."""


@dataclass(frozen=True)
class DiscountNotZero:
    """Product discount rate is not zero."""


@dataclass(frozen=True)
class AfterProduct:
    """Product ID is strictly greater than the cursor."""

    product_id: int


@dataclass(frozen=True)
class SharesCategoryWith:
    """Product shares a category with another product, excluding it."""

    product_id: int


Clause = Union[InCategory, StockStatus, DiscountNotNull, DiscountNotZero, AfterProduct, SharesCategoryWith]


@dataclass(frozen=True)
class Condition:
    """Conjunction of clauses. An empty condition matches every product."""

    clauses: tuple[Clause, ...] = ()

    def and_(self, *clauses: Clause) -> "Condition":
        """Return a new condition with extra clauses appended."""
        return Condition(self.clauses + clauses)

    def __bool__(self) -> bool:
        return bool(self.clauses)


# ============================================================================
# Builders
# ============================================================================


def stock_condition(stock: StockVisibility) -> Condition:
    """Condition holding only the optional in-stock clause."""
    if stock is StockVisibility.HIDE_OUT_OF_STOCK:
        return Condition((StockStatus(is_out_of_stock=False),))
    return Condition()


def build_condition(category_name: str, stock: StockVisibility) -> Condition:
    """Build the condition for a category listing.

    Products without a discount rate are always excluded. Sold-out
    products are excluded only when stock is HIDE_OUT_OF_STOCK.

    Args:
        category_name: Category the products must belong to.
        stock: Stock visibility for the listing.

    Returns:
        The listing condition.
    """
    base = Condition((InCategory(category_name), DiscountNotNull()))
    return base.and_(*stock_condition(stock).clauses)


def top_discount_condition() -> Condition:
    """Condition for the top-discount listing: discounted and in stock."""
    return Condition(
        (
            DiscountNotZero(),
            DiscountNotNull(),
            StockStatus(is_out_of_stock=False),
        )
    )


def similar_condition(product_id: int, stock: StockVisibility) -> Condition:
    """Condition for products similar to the given one."""
    base = Condition((SharesCategoryWith(product_id), DiscountNotNull()))
    return base.and_(*stock_condition(stock).clauses)
