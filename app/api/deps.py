"""Shared API dependencies.

Provides the optional bearer-token guard, query coercion and
service construction for routers.
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog.conditions import StockVisibility
from app.catalog.repository import ProductRepository
from app.catalog.service import CatalogService
from app.infrastructure.config import settings
from app.infrastructure.database import get_session
from app.notification.repository import NotificationRepository
from app.notification.service import NotificationService

logger = structlog.get_logger()

security = HTTPBearer(auto_error=False)

# Product IDs are stored as 32-bit integers.
INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1


# ============================================================================
# Authentication
# ============================================================================


def decode_user_id(token: str) -> int | None:
    """Extract the user ID claim from a bearer token.

    Args:
        token: Encoded JWT.

    Returns:
        User ID, or None if the token is invalid or carries no usable claim.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning("Invalid bearer token", error=str(e))
        return None

    raw = payload.get(settings.jwt_user_claim)
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


async def get_optional_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> int | None:
    """Get the caller's user ID, or None for anonymous callers.

    Never rejects the request. The result is kept on request state for the
    access log.
    """
    user_id = None
    if credentials is not None:
        user_id = decode_user_id(credentials.credentials)
    request.state.user_id = user_id
    return user_id


async def get_current_user_id(
    user_id: Annotated[int | None, Depends(get_optional_user_id)],
) -> int:
    """Get the caller's user ID.

    Raises:
        HTTPException: 401 if the caller is not authenticated.
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error_code": "UNAUTHORIZED",
                "message": "Authentication required",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


# ============================================================================
# Query coercion
# ============================================================================


def parse_cursor(raw: str | None) -> int | None:
    """Coerce a raw cursor value.

    Args:
        raw: Raw query value.

    Returns:
        The cursor when it parses to a non-zero integer that fits a
        product ID column, otherwise None.
    """
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    if not INT4_MIN <= value <= INT4_MAX:
        return None
    return value or None


def get_stock_visibility(
    is_out_of_stock: Annotated[
        str | None,
        Query(
            alias="isOutOfStock",
            description='Pass "false" to hide sold-out products',
        ),
    ] = None,
) -> StockVisibility:
    """Stock visibility from the isOutOfStock query parameter."""
    return StockVisibility.from_query(is_out_of_stock)


def get_cursor(
    cursor: Annotated[
        str | None,
        Query(description="Return products with an ID greater than this"),
    ] = None,
) -> int | None:
    """Pagination cursor from the cursor query parameter."""
    return parse_cursor(cursor)


# ============================================================================
# Services
# ============================================================================


def get_catalog_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogService:
    """Get catalog service bound to the request session."""
    return CatalogService(
        ProductRepository(session),
        top_limit=settings.top_products_limit,
        similar_limit=settings.similar_products_limit,
    )


def get_notification_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> NotificationService:
    """Get notification service bound to the request session."""
    return NotificationService(
        NotificationRepository(session),
        ProductRepository(session),
    )


OptionalUserId = Annotated[int | None, Depends(get_optional_user_id)]
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
Stock = Annotated[StockVisibility, Depends(get_stock_visibility)]
Cursor = Annotated[int | None, Depends(get_cursor)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
