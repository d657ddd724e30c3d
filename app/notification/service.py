"""Notification service for product price alerts.

Turns alerts on and off for a (user, product) pair. Subscribing is
create-if-absent: repeating it returns the existing subscription.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError

from app.catalog.models import Product
from app.catalog.repository import ProductRepository
from app.domain.exceptions import NotFoundProductError
from app.notification.models import NotificationSubscription
from app.notification.repository import NotificationRepository

logger = structlog.get_logger()


@dataclass
class SubscribeResult:
    """Result of a subscribe call.

    Attributes:
        subscription: The (new or existing) subscription.
        created: Whether this call created it.
    """

    subscription: NotificationSubscription
    created: bool


class NotificationService:
    """Service for price-alert subscriptions."""

    def __init__(
        self,
        repository: NotificationRepository,
        products: ProductRepository,
    ) -> None:
        """Initialize service with repositories.

        Args:
            repository: Subscription repository.
            products: Product repository, used to validate product IDs.
        """
        self.repository = repository
        self.products = products

    async def exists(self, user_id: int, product_id: int) -> bool:
        """Check whether a user has an alert on a product."""
        return await self.repository.get(user_id, product_id) is not None

    async def subscribe(self, user_id: int, product_id: int) -> SubscribeResult:
        """Turn on the alert for a product.

        Args:
            user_id: Subscribing user.
            product_id: Product to watch.

        Returns:
            The subscription and whether it was created by this call.

        Raises:
            NotFoundProductError: If the product does not exist.
        """
        existing = await self.repository.get(user_id, product_id)
        if existing is not None:
            logger.info(
                "Notification already enabled",
                user_id=user_id,
                product_id=product_id,
            )
            return SubscribeResult(subscription=existing, created=False)

        if await self.products.get_by_id(product_id) is None:
            raise NotFoundProductError(product_id)

        try:
            subscription = await self.repository.save(
                NotificationSubscription(user_id=user_id, product_id=product_id)
            )
        except IntegrityError:
            # A concurrent request created the same pair first.
            await self.repository.rollback()
            existing = await self.repository.get(user_id, product_id)
            if existing is None:
                raise
            logger.info(
                "Notification enabled concurrently",
                user_id=user_id,
                product_id=product_id,
            )
            return SubscribeResult(subscription=existing, created=False)

        logger.info("Notification enabled", user_id=user_id, product_id=product_id)
        return SubscribeResult(subscription=subscription, created=True)

    async def unsubscribe(self, user_id: int, product_id: int) -> bool:
        """Turn off the alert for a product.

        Args:
            user_id: Subscribed user.
            product_id: Watched product.

        Returns:
            True if an alert was removed, False if none was on.
        """
        existing = await self.repository.get(user_id, product_id)
        if existing is None:
            return False

        await self.repository.delete(existing)

        logger.info("Notification disabled", user_id=user_id, product_id=product_id)
        return True

    async def list_products(self, user_id: int) -> list[Product]:
        """List the products a user has alerts on."""
        products = await self.repository.find_products(user_id)
        return list(products)
