"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, RecipientKey, notification_manager
from .publisher import (
    NotificationPublisher,
    notification_publisher,
    serialize_notification,
)

__all__ = [
    "NotificationConnectionManager",
    "NotificationPublisher",
    "RecipientKey",
    "notification_manager",
    "notification_publisher",
    "serialize_notification",
]
