"""SQLAlchemy models for the deal catalog.

Defines Product, Category and the ProductCategory join table.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.database import Base


class ProductCategory(Base):
    """Join entity linking products to categories (many-to-many)."""

    __tablename__ = "product_categories"

    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.product_id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.category_id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )


class Category(Base):
    """Product category, unique by name.

    Attributes:
        category_id: Category identifier.
        category_name: Unique category name (e.g. "shoes").
    """

    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.category_id}, name={self.category_name})>"


class Product(Base):
    """Product entity in the catalog.

    Rows are written by the marketplace crawler; this service only reads them.

    Attributes:
        product_id: Product identifier, also used as the pagination cursor.
        real_id: Internal identifier of the crawled item.
        coupang_item_id: Marketplace item ID.
        coupang_vendor_id: Marketplace vendor item ID.
        product_name: Product title.
        product_image: Product image URL.
        is_out_of_stock: Whether the product is sold out.
        original_price: List price.
        current_price: Current selling price.
        discount_rate: Discount percent, None when not yet computed.
        card_discount: Extra card discount amount.
        product_url: Canonical marketplace URL.
        product_partners_url: Affiliate URL.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    real_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    coupang_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    coupang_vendor_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    product_name: Mapped[str] = mapped_column(String(500), nullable=False)
    product_image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_out_of_stock: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    original_price: Mapped[int] = mapped_column(Integer, nullable=False)
    current_price: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    discount_rate: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    card_discount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    product_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    product_partners_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary="product_categories",
        order_by="Category.category_id",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.product_id}, name={self.product_name[:30]}...)>"
