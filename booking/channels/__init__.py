"""Notification channels a validated booking is relayed to."""

from .base import DeliveryContext, DeliveryStatus, NotificationChannel, NotificationOutcome

__all__ = [
    "DeliveryContext",
    "DeliveryStatus",
    "NotificationChannel",
    "NotificationOutcome",
]
