"""API schemas for the deal catalog API.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Product Schemas
# ============================================================================


class CategorySummary(BaseModel):
    """Category a product belongs to."""

    category_id: int = Field(..., description="Category identifier")
    category_name: str = Field(..., description="Category name")


class ProductSummary(BaseModel):
    """Product fields exposed in listings."""

    product_id: int = Field(..., description="Product identifier")
    coupang_item_id: str | None = Field(default=None, description="Marketplace item ID")
    coupang_vendor_id: str | None = Field(
        default=None, description="Marketplace vendor item ID"
    )
    product_name: str = Field(..., description="Product title")
    product_image: str | None = Field(default=None, description="Product image URL")
    is_out_of_stock: bool = Field(..., description="Whether the product is sold out")
    original_price: int = Field(..., description="List price")
    current_price: int = Field(..., description="Current selling price")
    discount_rate: int | None = Field(default=None, description="Discount percent")
    card_discount: int | None = Field(default=None, description="Extra card discount")
    created_at: datetime = Field(..., description="When the product was first seen")
    updated_at: datetime = Field(..., description="When the product was last updated")
    categories: list[CategorySummary] = Field(
        default_factory=list, description="Categories of the product"
    )


class ProductDetail(ProductSummary):
    """Full product representation returned by the detail endpoint."""

    real_id: str | None = Field(default=None, description="Internal item identifier")
    product_url: str | None = Field(default=None, description="Marketplace URL")
    product_partners_url: str | None = Field(default=None, description="Affiliate URL")
    is_alert_on: bool = Field(
        default=False, description="Whether the caller has a price alert on this product"
    )


class ProductListResponse(BaseModel):
    """List of products."""

    items: list[ProductSummary] = Field(..., description="Products")
    total: int = Field(..., description="Number of products in this response")
    next_cursor: int | None = Field(
        default=None,
        description="Cursor for the next page, set when a limit was given and filled",
    )


# ============================================================================
# Notification Schemas
# ============================================================================


class NotificationResponse(BaseModel):
    """Price alert state for a product."""

    user_id: int = Field(..., description="Subscribed user")
    product_id: int = Field(..., description="Watched product")
    enabled: bool = Field(..., description="Whether the alert is on")
    created_at: datetime | None = Field(
        default=None, description="When the alert was turned on"
    )
