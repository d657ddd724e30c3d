"""Catalog service for product listings.

High-level service that validates categories and filters, builds
listing conditions and raises domain errors for empty results.
"""

import structlog

from app.catalog.conditions import (
    AfterProduct,
    Condition,
    StockVisibility,
    build_condition,
    similar_condition,
    stock_condition,
    top_discount_condition,
)
from app.catalog.models import Product
from app.catalog.policy import SortDirection, SortField, SortSpec, resolve_sort
from app.catalog.repository import ProductRepository
from app.domain.exceptions import NotFoundCategoryError, NotFoundProductError

logger = structlog.get_logger()

TOP_PRODUCTS_MAX = 10

_BY_DISCOUNT_DESC = SortSpec(SortField.DISCOUNT_RATE, SortDirection.DESC)


def _clamp_top(limit: int) -> int:
    """Keep a top-listing size within 1 and TOP_PRODUCTS_MAX."""
    return max(1, min(limit, TOP_PRODUCTS_MAX))


class CatalogService:
    """Service for catalog read operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(ProductRepository(session))

            products = await service.list_by_category_filtered(
                "shoes",
                "price_asc",
                stock=StockVisibility.HIDE_OUT_OF_STOCK,
            )
    """

    def __init__(
        self,
        repository: ProductRepository,
        top_limit: int = TOP_PRODUCTS_MAX,
        similar_limit: int = 10,
    ) -> None:
        """Initialize service with a product repository.

        Args:
            repository: Product repository.
            top_limit: Default size of the top-discount listing, kept within 1-10.
            similar_limit: Maximum number of similar products.
        """
        self.repository = repository
        self.top_limit = _clamp_top(top_limit)
        self.similar_limit = similar_limit

    async def list_all(
        self,
        user_id: int | None = None,
        stock: StockVisibility = StockVisibility.SHOW_ALL,
    ) -> list[Product]:
        """List every product, optionally hiding sold-out ones.

        An empty catalog is a valid answer here.

        Args:
            user_id: Calling user, if authenticated.
            stock: Stock visibility.

        Returns:
            All matching products ordered by ID.
        """
        products = await self.repository.find_all(stock_condition(stock))

        logger.info(
            "Listed all products",
            user_id=user_id,
            stock=stock.value,
            count=len(products),
        )
        return list(products)

    async def list_top(self, limit: int | None = None) -> list[Product]:
        """List the most discounted in-stock products.

        Args:
            limit: Number of products, kept within 1-10.

        Returns:
            Products ordered by discount rate, highest first.

        Raises:
            NotFoundProductError: If no product qualifies.
        """
        limit = self.top_limit if limit is None else _clamp_top(limit)

        products = await self.repository.find_all(
            top_discount_condition(),
            sort=_BY_DISCOUNT_DESC,
            limit=limit,
        )

        if not products:
            raise NotFoundProductError()

        logger.info("Listed top discounted products", limit=limit, count=len(products))
        return list(products)

    async def list_by_category(
        self,
        category_name: str,
        user_id: int | None = None,
        cursor: int | None = None,
        stock: StockVisibility = StockVisibility.SHOW_ALL,
        limit: int | None = None,
    ) -> list[Product]:
        """List discounted products in a category.

        Args:
            category_name: Category name.
            user_id: Calling user, if authenticated.
            cursor: Only return products with an ID greater than this.
            stock: Stock visibility.
            limit: Maximum results, None for no limit.

        Returns:
            Matching products ordered by ID.

        Raises:
            NotFoundCategoryError: If the category does not exist.
            NotFoundProductError: If the category has no matching products.
        """
        await self._ensure_category(category_name)

        condition = self._with_cursor(build_condition(category_name, stock), cursor)
        products = await self.repository.find_all(condition, limit=limit)

        if not products:
            raise NotFoundProductError()

        logger.info(
            "Listed products by category",
            category=category_name,
            user_id=user_id,
            cursor=cursor,
            stock=stock.value,
            count=len(products),
        )
        return list(products)

    async def list_by_category_filtered(
        self,
        category_name: str,
        filter_token: str,
        cursor: int | None = None,
        user_id: int | None = None,
        stock: StockVisibility = StockVisibility.SHOW_ALL,
        limit: int | None = None,
    ) -> list[Product]:
        """List discounted products in a category with a sort filter.

        Args:
            category_name: Category name.
            filter_token: One of discountRate_desc, price_asc, price_desc.
            cursor: Only return products with an ID greater than this.
            user_id: Calling user, if authenticated.
            stock: Stock visibility.
            limit: Maximum results, None for no limit.

        Returns:
            Matching products in filter order.

        Raises:
            NotFoundCategoryError: If the category does not exist.
            NotFoundCategoryFilterError: If the filter token is unknown.
            NotFoundProductError: If the category has no matching products.
        """
        await self._ensure_category(category_name)
        sort = resolve_sort(filter_token)

        condition = self._with_cursor(build_condition(category_name, stock), cursor)
        products = await self.repository.find_all(condition, sort=sort, limit=limit)

        if not products:
            raise NotFoundProductError()

        logger.info(
            "Listed products by category filter",
            category=category_name,
            filter=filter_token,
            user_id=user_id,
            cursor=cursor,
            stock=stock.value,
            count=len(products),
        )
        return list(products)

    async def get_detail(self, product_id: int, user_id: int | None = None) -> Product:
        """Get a single product.

        Args:
            product_id: Product ID.
            user_id: Calling user, if authenticated.

        Returns:
            The product with its categories.

        Raises:
            NotFoundProductError: If the product does not exist.
        """
        product = await self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundProductError(product_id)

        logger.debug("Fetched product detail", product_id=product_id, user_id=user_id)
        return product

    async def get_similar(
        self,
        product_id: int,
        user_id: int | None = None,
        stock: StockVisibility = StockVisibility.SHOW_ALL,
    ) -> list[Product]:
        """List products sharing a category with the given product.

        The source product is excluded, products without a discount rate
        are skipped and the best discounts come first.

        Args:
            product_id: Source product ID.
            user_id: Calling user, if authenticated.
            stock: Stock visibility.

        Returns:
            Similar products, possibly empty.

        Raises:
            NotFoundProductError: If the source product does not exist.
        """
        await self.get_detail(product_id, user_id)

        products = await self.repository.find_all(
            similar_condition(product_id, stock),
            sort=_BY_DISCOUNT_DESC,
            limit=self.similar_limit,
        )

        logger.info(
            "Listed similar products",
            product_id=product_id,
            user_id=user_id,
            count=len(products),
        )
        return list(products)

    async def _ensure_category(self, category_name: str) -> None:
        """Raise NotFoundCategoryError unless the category exists."""
        category = await self.repository.get_category_by_name(category_name)
        if category is None:
            logger.info("Category not found", category=category_name)
            raise NotFoundCategoryError(category_name)

    @staticmethod
    def _with_cursor(condition: Condition, cursor: int | None) -> Condition:
        if cursor is None:
            return condition
        return condition.and_(AfterProduct(cursor))
