"""Product Catalog Service.

Provides category-scoped listings, sort filters, top discounts and
similar-product lookups over the product catalog.
"""

from app.catalog.conditions import (
    Condition,
    StockVisibility,
    build_condition,
    similar_condition,
    stock_condition,
    top_discount_condition,
)
from app.catalog.models import Category, Product, ProductCategory
from app.catalog.policy import FilterToken, SortDirection, SortField, SortSpec, resolve_sort
from app.catalog.repository import ProductRepository
from app.catalog.service import CatalogService

__all__ = [
    # Models
    "Category",
    "Product",
    "ProductCategory",
    # Conditions
    "Condition",
    "StockVisibility",
    "build_condition",
    "similar_condition",
    "stock_condition",
    "top_discount_condition",
    # Sort policy
    "FilterToken",
    "SortDirection",
    "SortField",
    "SortSpec",
    "resolve_sort",
    # Repository
    "ProductRepository",
    # Service
    "CatalogService",
]
