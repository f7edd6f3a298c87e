"""Errors raised by the notification core."""

from __future__ import annotations


class NotificationValidationError(ValueError):
    """A notification is malformed (blank text, unknown priority, no target)."""


class NotificationNotFoundError(LookupError):
    """An operation referenced a notification id that does not exist."""

    def __init__(self, notification_id: int) -> None:
        super().__init__(f"Notification with id {notification_id} not found")
        self.notification_id = notification_id


class DeliveryFailure(RuntimeError):
    """A realtime push could not be delivered. Never propagated to callers."""


class AggregationFailure(RuntimeError):
    """A statistics run could not collect its counts."""


__all__ = [
    "AggregationFailure",
    "DeliveryFailure",
    "NotificationNotFoundError",
    "NotificationValidationError",
]
