"""Shared fixtures for catalog, notification and API tests.

Tests run against an in-memory SQLite database through aiosqlite.
"""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.catalog.models import Category, Product
from app.infrastructure.config import settings
from app.infrastructure.database import Base, get_session
from app.main import app


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for a test."""
    async with session_factory() as session:
        yield session


# ============================================================================
# Sample Data
# ============================================================================


def make_product(product_id: int, categories: list[Category], **overrides: Any) -> Product:
    """Create a product with sensible defaults."""
    fields: dict[str, Any] = {
        "product_id": product_id,
        "real_id": f"real-{product_id}",
        "coupang_item_id": f"item-{product_id}",
        "coupang_vendor_id": f"vendor-{product_id}",
        "product_name": f"Product {product_id}",
        "product_image": f"https://img.example.com/{product_id}.jpg",
        "is_out_of_stock": False,
        "original_price": 100000,
        "current_price": 90000,
        "discount_rate": 10,
        "card_discount": None,
        "product_url": f"https://shop.example.com/p/{product_id}",
        "product_partners_url": f"https://link.example.com/p/{product_id}",
    }
    fields.update(overrides)
    return Product(categories=categories, **fields)


@pytest.fixture
def product_factory():
    """Factory for products with default fields."""
    return make_product


@pytest_asyncio.fixture
async def catalog(session: AsyncSession) -> dict[str, Any]:
    """Seed a small catalog.

    shoes: 1 (10%, 50000), 2 (no discount), 3 (30%, 90000, sold out),
           4 (30%, 40000), 6 (50%, 70000)
    bags:  5 (0%, 30000), 6
    hats:  empty
    """
    shoes = Category(category_id=1, category_name="shoes")
    bags = Category(category_id=2, category_name="bags")
    hats = Category(category_id=3, category_name="hats")

    products = [
        make_product(1, [shoes], discount_rate=10, current_price=50000),
        make_product(2, [shoes], discount_rate=None, current_price=60000),
        make_product(3, [shoes], discount_rate=30, current_price=90000, is_out_of_stock=True),
        make_product(4, [shoes], discount_rate=30, current_price=40000),
        make_product(5, [bags], discount_rate=0, current_price=30000),
        make_product(6, [shoes, bags], discount_rate=50, current_price=70000),
    ]

    session.add_all([shoes, bags, hats, *products])
    await session.commit()

    return {
        "categories": {"shoes": shoes, "bags": bags, "hats": hats},
        "products": {p.product_id: p for p in products},
    }


# ============================================================================
# Client Fixtures
# ============================================================================


def make_token(user_id: int) -> str:
    """Create a bearer token for a user."""
    return jwt.encode(
        {settings.jwt_user_claim: user_id},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture
def token_factory():
    """Factory for bearer tokens."""
    return make_token


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an HTTP client against the app using the test database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers for user 7."""
    return {"Authorization": f"Bearer {make_token(7)}"}
