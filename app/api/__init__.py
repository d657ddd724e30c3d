"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from app.api.health import router as health_router
from app.api.notifications import router as notifications_router
from app.api.products import router as products_router

__all__ = [
    "health_router",
    "notifications_router",
    "products_router",
]
