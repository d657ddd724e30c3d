"""Notification API endpoints.

Provides endpoints for turning product price alerts on and off.
All endpoints require an authenticated user.
"""

from fastapi import APIRouter, Response, status

from app.api.deps import CurrentUserId, NotificationServiceDep
from app.api.products import products_to_response
from app.api.schemas import ErrorResponse, NotificationResponse, ProductListResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=ProductListResponse,
    responses={401: {"model": ErrorResponse}},
    summary="List products with alerts",
)
async def list_notifications(
    user_id: CurrentUserId,
    service: NotificationServiceDep,
) -> ProductListResponse:
    """List products the caller has price alerts on."""
    products = await service.list_products(user_id)
    return products_to_response(products)


@router.post(
    "/products/{product_id}",
    response_model=NotificationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": NotificationResponse, "description": "Alert was already on"},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Turn on price alert",
)
async def set_notification(
    product_id: int,
    user_id: CurrentUserId,
    service: NotificationServiceDep,
    response: Response,
) -> NotificationResponse:
    """Turn on the price alert for a product.

    Returns 201 when the alert is created and 200 when it was already on.

    Args:
        product_id: Product to watch.
        user_id: Authenticated caller.
        service: Notification service.
        response: Outgoing response, used to set the status code.

    Returns:
        Alert state.
    """
    result = await service.subscribe(user_id, product_id)

    if not result.created:
        response.status_code = status.HTTP_200_OK

    return NotificationResponse(
        user_id=result.subscription.user_id,
        product_id=result.subscription.product_id,
        enabled=True,
        created_at=result.subscription.created_at,
    )


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}},
    summary="Turn off price alert",
)
async def delete_notification(
    product_id: int,
    user_id: CurrentUserId,
    service: NotificationServiceDep,
) -> Response:
    """Turn off the price alert for a product. Succeeds if it was already off."""
    await service.unsubscribe(user_id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
