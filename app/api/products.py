"""Product API endpoints.

Provides catalog listings, category filters, top discounts,
product detail and similar products. Authentication is optional.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.deps import (
    CatalogServiceDep,
    Cursor,
    NotificationServiceDep,
    OptionalUserId,
    Stock,
)
from app.api.schemas import (
    CategorySummary,
    ErrorResponse,
    ProductDetail,
    ProductListResponse,
    ProductSummary,
)
from app.catalog.models import Product

router = APIRouter(prefix="/products", tags=["Products"])

Limit = Annotated[int | None, Query(ge=1, le=100, description="Maximum products to return")]

NOT_FOUND = {404: {"model": ErrorResponse}}


# ============================================================================
# Converters
# ============================================================================


def product_to_summary(product: Product) -> ProductSummary:
    """Convert Product model to list projection."""
    return ProductSummary(
        product_id=product.product_id,
        coupang_item_id=product.coupang_item_id,
        coupang_vendor_id=product.coupang_vendor_id,
        product_name=product.product_name,
        product_image=product.product_image,
        is_out_of_stock=product.is_out_of_stock,
        original_price=product.original_price,
        current_price=product.current_price,
        discount_rate=product.discount_rate,
        card_discount=product.card_discount,
        created_at=product.created_at,
        updated_at=product.updated_at,
        categories=[
            CategorySummary(
                category_id=category.category_id,
                category_name=category.category_name,
            )
            for category in product.categories
        ],
    )


def product_to_detail(product: Product, is_alert_on: bool = False) -> ProductDetail:
    """Convert Product model to detail projection."""
    summary = product_to_summary(product)
    return ProductDetail(
        **summary.model_dump(),
        real_id=product.real_id,
        product_url=product.product_url,
        product_partners_url=product.product_partners_url,
        is_alert_on=is_alert_on,
    )


def products_to_response(
    products: list[Product],
    limit: int | None = None,
) -> ProductListResponse:
    """Convert a product list to a list response.

    next_cursor is only set when a limit was requested and filled, so an
    unlimited or short page never points past the end. Pass no limit for
    listings that are not ordered by product ID.
    """
    next_cursor = None
    if limit is not None and products and len(products) == limit:
        next_cursor = products[-1].product_id

    return ProductListResponse(
        items=[product_to_summary(p) for p in products],
        total=len(products),
        next_cursor=next_cursor,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="List every product. Pass isOutOfStock=false to hide sold-out products.",
)
async def list_products(
    service: CatalogServiceDep,
    user_id: OptionalUserId,
    stock: Stock,
) -> ProductListResponse:
    """List all products."""
    products = await service.list_all(user_id=user_id, stock=stock)
    return products_to_response(products)


@router.get(
    "/top",
    response_model=ProductListResponse,
    responses=NOT_FOUND,
    summary="Top discounted products",
    description="Up to 10 in-stock products with the highest discount rate.",
)
async def list_top_products(service: CatalogServiceDep) -> ProductListResponse:
    """List the top discounted products."""
    products = await service.list_top()
    return products_to_response(products)


@router.get(
    "/category/{category_name}",
    response_model=ProductListResponse,
    responses=NOT_FOUND,
    summary="List products by category",
)
async def list_products_by_category(
    category_name: str,
    service: CatalogServiceDep,
    user_id: OptionalUserId,
    stock: Stock,
    cursor: Cursor,
    limit: Limit = None,
) -> ProductListResponse:
    """List discounted products in a category.

    Args:
        category_name: Category name.
        service: Catalog service.
        user_id: Caller, if authenticated.
        stock: Stock visibility.
        cursor: Pagination cursor.
        limit: Page size.

    Returns:
        Products in the category.
    """
    products = await service.list_by_category(
        category_name,
        user_id=user_id,
        cursor=cursor,
        stock=stock,
        limit=limit,
    )
    return products_to_response(products, limit)


@router.get(
    "/category/{category_name}/{filter_token}",
    response_model=ProductListResponse,
    responses=NOT_FOUND,
    summary="List products by category with a sort filter",
    description="filter_token is one of discountRate_desc, price_asc, price_desc.",
)
async def list_products_by_category_filter(
    category_name: str,
    filter_token: str,
    service: CatalogServiceDep,
    user_id: OptionalUserId,
    stock: Stock,
    cursor: Cursor,
    limit: Limit = None,
) -> ProductListResponse:
    """List discounted products in a category, sorted by a filter.

    The cursor still filters on product ID, so it cannot resume a price
    or discount ordering and no next_cursor is returned.
    """
    products = await service.list_by_category_filtered(
        category_name,
        filter_token,
        cursor=cursor,
        user_id=user_id,
        stock=stock,
        limit=limit,
    )
    return products_to_response(products)


@router.get(
    "/{product_id}",
    response_model=ProductDetail,
    responses=NOT_FOUND,
    summary="Get product detail",
)
async def get_product(
    product_id: int,
    service: CatalogServiceDep,
    notifications: NotificationServiceDep,
    user_id: OptionalUserId,
) -> ProductDetail:
    """Get a product by ID.

    Authenticated callers also learn whether their price alert is on.
    """
    product = await service.get_detail(product_id, user_id=user_id)

    is_alert_on = False
    if user_id is not None:
        is_alert_on = await notifications.exists(user_id, product_id)

    return product_to_detail(product, is_alert_on=is_alert_on)


@router.get(
    "/{product_id}/similar",
    response_model=ProductListResponse,
    responses=NOT_FOUND,
    summary="List similar products",
    description="Discounted products sharing a category with the given product.",
)
async def list_similar_products(
    product_id: int,
    service: CatalogServiceDep,
    user_id: OptionalUserId,
    stock: Stock,
) -> ProductListResponse:
    """List products similar to the given one."""
    products = await service.get_similar(product_id, user_id=user_id, stock=stock)
    return products_to_response(products)
