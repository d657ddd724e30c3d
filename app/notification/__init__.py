"""Price-alert notification subscriptions."""

from app.notification.models import NotificationSubscription
from app.notification.repository import NotificationRepository
from app.notification.service import NotificationService, SubscribeResult

__all__ = [
    "NotificationRepository",
    "NotificationService",
    "NotificationSubscription",
    "SubscribeResult",
]
