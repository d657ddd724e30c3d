"""Tests for CatalogService against the seeded catalog."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog.conditions import StockVisibility
from app.catalog.models import Category
from app.catalog.repository import ProductRepository
from app.catalog.service import CatalogService
from app.domain.exceptions import (
    NotFoundCategoryError,
    NotFoundCategoryFilterError,
    NotFoundProductError,
)

HIDE = StockVisibility.HIDE_OUT_OF_STOCK


@pytest.fixture
def service(session: AsyncSession) -> CatalogService:
    """Create catalog service over the test session."""
    return CatalogService(ProductRepository(session))


def ids(products) -> list[int]:
    return [p.product_id for p in products]


class TestListAll:
    """Tests for list_all."""

    @pytest.mark.asyncio
    async def test_lists_everything(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Unfiltered listing includes null discounts and sold-out products."""
        products = await service.list_all()
        assert ids(products) == [1, 2, 3, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_hides_sold_out(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Hiding sold-out products drops product 3."""
        products = await service.list_all(stock=HIDE)
        assert ids(products) == [1, 2, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_empty_catalog_is_valid(self, service: CatalogService) -> None:
        """An empty catalog returns an empty list instead of raising."""
        assert await service.list_all() == []


class TestListTop:
    """Tests for list_top."""

    @pytest.mark.asyncio
    async def test_orders_by_discount(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Zero, null and sold-out products are excluded."""
        products = await service.list_top()
        assert ids(products) == [6, 4, 1]

    @pytest.mark.asyncio
    async def test_never_more_than_ten(
        self,
        service: CatalogService,
        session: AsyncSession,
        product_factory,
    ) -> None:
        """The listing is capped at 10 even when more products qualify."""
        category = Category(category_name="misc")
        session.add_all(
            [product_factory(i, [category], discount_rate=i) for i in range(1, 16)]
        )
        await session.commit()

        products = await service.list_top()
        assert len(products) == 10
        assert ids(products) == list(range(15, 5, -1))

        products = await service.list_top(limit=50)
        assert len(products) == 10

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, -100])
    async def test_non_positive_limit_is_clamped(
        self,
        service: CatalogService,
        session: AsyncSession,
        product_factory,
        limit: int,
    ) -> None:
        """A zero or negative limit still returns a bounded listing."""
        category = Category(category_name="misc")
        session.add_all(
            [product_factory(i, [category], discount_rate=i) for i in range(1, 15)]
        )
        await session.commit()

        products = await service.list_top(limit=limit)
        assert ids(products) == [14]

    @pytest.mark.asyncio
    async def test_configured_limit_is_clamped(
        self,
        session: AsyncSession,
        product_factory,
    ) -> None:
        """Out-of-range configured limits are kept within 1-10."""
        category = Category(category_name="misc")
        session.add_all(
            [product_factory(i, [category], discount_rate=i) for i in range(1, 15)]
        )
        await session.commit()

        negative = CatalogService(ProductRepository(session), top_limit=-1)
        assert ids(await negative.list_top()) == [14]

        huge = CatalogService(ProductRepository(session), top_limit=500)
        assert len(await huge.list_top()) == 10

    @pytest.mark.asyncio
    async def test_smaller_limit(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """A smaller limit returns fewer products."""
        products = await service.list_top(limit=2)
        assert ids(products) == [6, 4]

    @pytest.mark.asyncio
    async def test_empty_raises(self, service: CatalogService) -> None:
        """No qualifying product is reported as not found."""
        with pytest.raises(NotFoundProductError):
            await service.list_top()


class TestListByCategory:
    """Tests for list_by_category."""

    @pytest.mark.asyncio
    async def test_excludes_null_discount(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """Products without a discount rate never appear."""
        products = await service.list_by_category("shoes")
        assert ids(products) == [1, 3, 4, 6]

    @pytest.mark.asyncio
    async def test_hide_out_of_stock(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """Sold-out products are dropped only when hidden."""
        products = await service.list_by_category("shoes", stock=HIDE)
        assert ids(products) == [1, 4, 6]

    @pytest.mark.asyncio
    async def test_zero_discount_is_listed(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """A zero discount is not null, so it stays in category listings."""
        products = await service.list_by_category("bags")
        assert ids(products) == [5, 6]

    @pytest.mark.asyncio
    async def test_cursor(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Only products after the cursor are returned."""
        products = await service.list_by_category("shoes", cursor=3)
        assert ids(products) == [4, 6]

    @pytest.mark.asyncio
    async def test_limit(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """The take-limit caps the page."""
        first = await service.list_by_category("shoes", limit=2)
        second = await service.list_by_category("shoes", cursor=first[-1].product_id, limit=2)
        assert ids(first) == [1, 3]
        assert ids(second) == [4, 6]

    @pytest.mark.asyncio
    async def test_cursor_past_end_raises(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """An exhausted cursor is reported as not found."""
        with pytest.raises(NotFoundProductError):
            await service.list_by_category("shoes", cursor=6)

    @pytest.mark.asyncio
    async def test_unknown_category(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """A missing category raises NotFoundCategoryError."""
        with pytest.raises(NotFoundCategoryError) as exc_info:
            await service.list_by_category("socks")
        assert exc_info.value.details == {"category_name": "socks"}

    @pytest.mark.asyncio
    async def test_empty_category(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """An existing category without products raises NotFoundProductError."""
        with pytest.raises(NotFoundProductError):
            await service.list_by_category("hats")

    @pytest.mark.asyncio
    async def test_idempotent(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Repeated calls return identical ordered results."""
        first = await service.list_by_category("shoes")
        second = await service.list_by_category("shoes")
        assert ids(first) == ids(second)

    @pytest.mark.asyncio
    async def test_products_carry_categories(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """Listed products have their categories loaded."""
        products = await service.list_by_category("bags")
        product_6 = products[-1]
        assert [c.category_name for c in product_6.categories] == ["shoes", "bags"]


class TestListByCategoryFiltered:
    """Tests for list_by_category_filtered."""

    @pytest.mark.asyncio
    async def test_price_asc(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Cheapest first."""
        products = await service.list_by_category_filtered("shoes", "price_asc")
        assert ids(products) == [4, 1, 6, 3]

    @pytest.mark.asyncio
    async def test_price_desc(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Most expensive first."""
        products = await service.list_by_category_filtered("shoes", "price_desc")
        assert ids(products) == [3, 6, 1, 4]

    @pytest.mark.asyncio
    async def test_discount_desc_ties_by_id(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """Equal discounts keep product ID order."""
        products = await service.list_by_category_filtered("shoes", "discountRate_desc")
        assert ids(products) == [6, 3, 4, 1]

    @pytest.mark.asyncio
    async def test_filter_with_stock_and_limit(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """Stock visibility and limit combine with the sort."""
        products = await service.list_by_category_filtered(
            "shoes", "price_desc", stock=HIDE, limit=2
        )
        assert ids(products) == [6, 1]

    @pytest.mark.asyncio
    async def test_unknown_filter(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """An unknown filter raises even for a valid category."""
        with pytest.raises(NotFoundCategoryFilterError):
            await service.list_by_category_filtered("shoes", "price_bogus")

    @pytest.mark.asyncio
    async def test_unknown_category_checked_first(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """A missing category wins over a bad filter."""
        with pytest.raises(NotFoundCategoryError):
            await service.list_by_category_filtered("socks", "price_bogus")

    @pytest.mark.asyncio
    async def test_empty_category(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """An existing empty category raises NotFoundProductError."""
        with pytest.raises(NotFoundProductError):
            await service.list_by_category_filtered("hats", "price_asc")


class TestGetDetail:
    """Tests for get_detail."""

    @pytest.mark.asyncio
    async def test_found(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Returns the product with detail fields."""
        product = await service.get_detail(6, user_id=7)
        assert product.product_id == 6
        assert product.real_id == "real-6"
        assert product.product_partners_url == "https://link.example.com/p/6"

    @pytest.mark.asyncio
    async def test_not_found(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Missing product raises NotFoundProductError with its ID."""
        with pytest.raises(NotFoundProductError) as exc_info:
            await service.get_detail(999)
        assert exc_info.value.details == {"product_id": 999}


class TestGetSimilar:
    """Tests for get_similar."""

    @pytest.mark.asyncio
    async def test_shares_category(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """Same-category products, best discount first, excluding self and null discounts."""
        products = await service.get_similar(1)
        assert ids(products) == [6, 3, 4]

    @pytest.mark.asyncio
    async def test_any_shared_category(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """A product in two categories matches both."""
        products = await service.get_similar(6)
        assert ids(products) == [3, 4, 1, 5]

    @pytest.mark.asyncio
    async def test_hide_out_of_stock(
        self, service: CatalogService, catalog: dict[str, Any]
    ) -> None:
        """Stock visibility applies to similar products."""
        products = await service.get_similar(1, stock=HIDE)
        assert ids(products) == [6, 4]

    @pytest.mark.asyncio
    async def test_capped(self, session: AsyncSession, catalog: dict[str, Any]) -> None:
        """The similar limit caps the result."""
        service = CatalogService(ProductRepository(session), similar_limit=1)
        products = await service.get_similar(1)
        assert ids(products) == [6]

    @pytest.mark.asyncio
    async def test_no_similar_is_empty(
        self,
        service: CatalogService,
        session: AsyncSession,
        product_factory,
    ) -> None:
        """A product alone in its category has no similar products."""
        session.add(product_factory(1, [Category(category_name="solo")]))
        await session.commit()

        assert await service.get_similar(1) == []

    @pytest.mark.asyncio
    async def test_unknown_product(self, service: CatalogService, catalog: dict[str, Any]) -> None:
        """The source product must exist."""
        with pytest.raises(NotFoundProductError):
            await service.get_similar(999)


class TestValidationOrder:
    """Category checks happen before any product query."""

    @pytest.fixture
    def repository(self) -> MagicMock:
        """Repository mock with no categories."""
        repository = MagicMock(spec=ProductRepository)
        repository.get_category_by_name = AsyncMock(return_value=None)
        repository.find_all = AsyncMock(return_value=[])
        return repository

    @pytest.mark.asyncio
    async def test_missing_category_skips_product_query(self, repository: MagicMock) -> None:
        """No product predicate is evaluated for a missing category."""
        service = CatalogService(repository)

        with pytest.raises(NotFoundCategoryError):
            await service.list_by_category("socks")
        with pytest.raises(NotFoundCategoryError):
            await service.list_by_category_filtered("socks", "price_asc")

        repository.find_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bad_filter_skips_product_query(self, repository: MagicMock) -> None:
        """An unknown filter is rejected before querying products."""
        repository.get_category_by_name.return_value = Category(
            category_id=1, category_name="shoes"
        )
        service = CatalogService(repository)

        with pytest.raises(NotFoundCategoryFilterError):
            await service.list_by_category_filtered("shoes", "price_bogus")

        repository.find_all.assert_not_awaited()
