"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager, role_topic
from .publisher import (
    DeliveryChannel,
    NotificationPublisher,
    get_delivery_channel,
    notification_publisher,
    serialize_notification,
)

__all__ = [
    "DeliveryChannel",
    "NotificationConnectionManager",
    "notification_manager",
    "role_topic",
    "NotificationPublisher",
    "notification_publisher",
    "get_delivery_channel",
    "serialize_notification",
]
