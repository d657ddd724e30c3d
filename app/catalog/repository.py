"""Product repository for database operations.

Compiles listing conditions into SQLAlchemy queries and loads products
together with their categories.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.catalog.conditions import (
    AfterProduct,
    Clause,
    Condition,
    DiscountNotNull,
    DiscountNotZero,
    InCategory,
    SharesCategoryWith,
    StockStatus,
)
from app.catalog.models import Category, Product, ProductCategory
from app.catalog.policy import SortDirection, SortField, SortSpec


def compile_clause(clause: Clause) -> Any:
    """Compile a single condition clause into a SQLAlchemy expression.

    Args:
        clause: Clause to compile.

    Returns:
        SQLAlchemy boolean expression.
    """
    if isinstance(clause, InCategory):
        return Product.categories.any(Category.category_name == clause.name)
    if isinstance(clause, StockStatus):
        return Product.is_out_of_stock == clause.is_out_of_stock
    if isinstance(clause, DiscountNotNull):
        return Product.discount_rate.is_not(None)
    if isinstance(clause, DiscountNotZero):
        return Product.discount_rate != 0
    if isinstance(clause, AfterProduct):
        return Product.product_id > clause.product_id
    if isinstance(clause, SharesCategoryWith):
        source_categories = select(ProductCategory.category_id).where(
            ProductCategory.product_id == clause.product_id
        )
        return and_(
            Product.categories.any(Category.category_id.in_(source_categories)),
            Product.product_id != clause.product_id,
        )
    raise TypeError(f"Unsupported clause: {clause!r}")


def compile_condition(condition: Condition) -> Any:
    """Fold a condition into a single AND expression.

    Args:
        condition: Condition to compile.

    Returns:
        SQLAlchemy expression, or None for an empty condition.
    """
    if not condition:
        return None
    return and_(*(compile_clause(clause) for clause in condition.clauses))


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products = await repo.find_all(
                build_condition("shoes", StockVisibility.SHOW_ALL),
                sort=resolve_sort("price_asc"),
                limit=20,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_category_by_name(self, category_name: str) -> Category | None:
        """Get category by its unique name.

        Args:
            category_name: Category name.

        Returns:
            Category if found, None otherwise.
        """
        query = select(Category).where(Category.category_name == category_name)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get product by ID with its categories.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        query = (
            select(Product)
            .where(Product.product_id == product_id)
            .options(selectinload(Product.categories))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_all(
        self,
        condition: Condition,
        sort: SortSpec | None = None,
        limit: int | None = None,
    ) -> Sequence[Product]:
        """Find products matching a condition.

        Results are ordered by the sort specification when given, with
        product ID ascending as the tie-break (or sole key without a sort).

        Args:
            condition: Listing condition.
            sort: Optional single-field sort.
            limit: Maximum results, None for no limit.

        Returns:
            Sequence of matching products with categories loaded.
        """
        query = select(Product).options(selectinload(Product.categories))

        where = compile_condition(condition)
        if where is not None:
            query = query.where(where)

        # Sorting
        if sort is not None:
            sort_column = self._get_sort_column(sort.field)
            if sort.direction is SortDirection.DESC:
                query = query.order_by(sort_column.desc())
            else:
                query = query.order_by(sort_column.asc())
        query = query.order_by(Product.product_id.asc())

        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    def _get_sort_column(self, sort_field: SortField) -> Any:
        """Get SQLAlchemy column for sorting.

        Args:
            sort_field: Sort field.

        Returns:
            SQLAlchemy column.
        """
        columns = {
            SortField.DISCOUNT_RATE: Product.discount_rate,
            SortField.CURRENT_PRICE: Product.current_price,
        }
        return columns[sort_field]
