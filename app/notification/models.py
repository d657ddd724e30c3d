"""SQLAlchemy models for price-alert subscriptions."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database import Base


class NotificationSubscription(Base):
    """A user's price alert on a product.

    The row carries no payload: its existence means the alert is on.

    Attributes:
        id: Subscription identifier.
        user_id: Subscribing user.
        product_id: Watched product.
        created_at: When the alert was turned on.
    """

    __tablename__ = "user_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.product_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_products_user_product"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<NotificationSubscription(user_id={self.user_id}, product_id={self.product_id})>"
