"""Notification subscription repository for database operations."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.catalog.models import Product
from app.notification.models import NotificationSubscription


class NotificationRepository:
    """Repository for NotificationSubscription database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get(self, user_id: int, product_id: int) -> NotificationSubscription | None:
        """Get the subscription for a (user, product) pair.

        Args:
            user_id: User ID.
            product_id: Product ID.

        Returns:
            Subscription if found, None otherwise.
        """
        query = select(NotificationSubscription).where(
            NotificationSubscription.user_id == user_id,
            NotificationSubscription.product_id == product_id,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def save(self, subscription: NotificationSubscription) -> NotificationSubscription:
        """Save a subscription to database.

        Args:
            subscription: Subscription to save.

        Returns:
            Saved subscription.
        """
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def rollback(self) -> None:
        """Roll back the pending transaction after a failed write."""
        await self.session.rollback()

    async def delete(self, subscription: NotificationSubscription) -> None:
        """Delete a subscription.

        Args:
            subscription: Subscription to delete.
        """
        await self.session.delete(subscription)
        await self.session.flush()

    async def find_products(self, user_id: int) -> Sequence[Product]:
        """Get products a user has alerts on, newest subscription first.

        Args:
            user_id: User ID.

        Returns:
            Sequence of products with categories loaded.
        """
        query = (
            select(Product)
            .join(
                NotificationSubscription,
                NotificationSubscription.product_id == Product.product_id,
            )
            .where(NotificationSubscription.user_id == user_id)
            .order_by(
                NotificationSubscription.created_at.desc(),
                NotificationSubscription.id.desc(),
            )
            .options(selectinload(Product.categories))
        )
        result = await self.session.execute(query)
        return result.scalars().all()
