"""Create, query and transition notifications.

The router is the only writer of the notification store. It validates and
persists notifications, resolves their audience through the visibility rule,
and hands freshly created notifications to the optional delivery channel.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from consultoria.domain.entities import (
    PRIORITIES,
    PRIORITY_MEDIUM,
    Notification,
    NotificationPage,
    NotificationStats,
    Target,
    UserTarget,
    RoleTarget,
)
from consultoria.domain.exceptions import (
    NotificationNotFoundError,
    NotificationValidationError,
)
from consultoria.infrastructure.notifications import DeliveryChannel, get_delivery_channel
from consultoria.infrastructure.repositories import NotificationRepository
from consultoria.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class NotificationRouter:
    """Entry point for every notification state change and query."""

    def __init__(
        self,
        session: Session,
        *,
        delivery: DeliveryChannel | None = None,
    ) -> None:
        self.session = session
        self.repository = NotificationRepository(session)
        self.delivery = delivery

    def create(
        self,
        *,
        event_type: str,
        title: str | None,
        message: str | None,
        target: Target | None,
        priority: str = PRIORITY_MEDIUM,
        related_entity_id: int | None = None,
        related_entity_type: str | None = None,
        metadata: str | None = None,
    ) -> Notification:
        """Validate, persist and push a new notification.

        Raises :class:`NotificationValidationError` when the title or message is
        blank, the priority is unknown, or no target is given. Nothing is
        persisted in that case.
        """

        if title is None or not title.strip():
            raise NotificationValidationError("El título es requerido para crear la notificación")
        if message is None or not message.strip():
            raise NotificationValidationError("El mensaje es requerido para crear la notificación")
        if not isinstance(target, (UserTarget, RoleTarget)):
            raise NotificationValidationError("Se requiere userId o role para crear la notificación")
        normalized_priority = (priority or PRIORITY_MEDIUM).strip().lower()
        if normalized_priority not in PRIORITIES:
            raise NotificationValidationError(f"Prioridad no válida: {priority}")

        notification = Notification(
            id=None,
            target=target,
            event_type=(event_type or "GENERAL").strip(),
            title=title,
            message=message,
            priority=normalized_priority,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type,
            read=False,
            created_at=now_in_app_timezone(),
            metadata=metadata,
        )
        saved = self.repository.create(notification)
        logger.info(
            "Notification %s created: %s (%s)", saved.id, saved.event_type, _describe(saved.target)
        )
        self._push(saved)
        return saved

    def get(self, notification_id: int) -> Notification:
        notification = self.repository.get(notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        return notification

    def list(self, user_id: int, role: str | None, page: int = 0, size: int = 20) -> NotificationPage:
        """Return the notifications visible to the caller, newest first."""

        _validate_paging(page, size)
        items = self.repository.list_visible(user_id, role, offset=page * size, limit=size)
        total = self.repository.count_visible(user_id, role)
        return NotificationPage(items=list(items), page=page, size=size, total=total)

    def mark_read(self, notification_id: int) -> None:
        """Flag a notification as read; repeated calls are harmless."""

        if not self.repository.mark_read(notification_id):
            raise NotificationNotFoundError(notification_id)
        logger.debug("Notification %s marked as read", notification_id)

    def mark_many_read(self, notification_ids: list[int], user_id: int, role: str | None) -> int:
        """Flag the given ids as read, restricted to those visible to the caller."""

        return self.repository.mark_read_many(notification_ids, user_id=user_id, role=role)

    def mark_all_read(self, user_id: int, role: str | None) -> int:
        updated = self.repository.mark_all_read(user_id, role)
        logger.info("Marked %d notification(s) as read for user %s (role %s)", updated, user_id, role)
        return updated

    def delete(self, notification_id: int) -> None:
        if not self.repository.delete(notification_id):
            raise NotificationNotFoundError(notification_id)
        logger.info("Notification %s deleted", notification_id)

    def stats(self, user_id: int, role: str | None) -> NotificationStats:
        return NotificationStats(
            unread=self.repository.count_unread_visible(user_id, role),
            total=self.repository.count_visible(user_id, role),
        )

    def list_for_role(self, role: str, page: int = 0, size: int = 20) -> NotificationPage:
        """Return the broadcasts addressed to ``role`` regardless of the reader."""

        _validate_paging(page, size)
        items = self.repository.list_for_role(role, offset=page * size, limit=size)
        total = self.repository.count_for_role(role)
        return NotificationPage(items=list(items), page=page, size=size, total=total)

    def delete_for_role(self, role: str) -> int:
        deleted = self.repository.delete_for_role(role)
        logger.info("Deleted %d notification(s) broadcast to role %s", deleted, role)
        return deleted

    def _push(self, notification: Notification) -> None:
        if self.delivery is None:
            logger.debug("Realtime delivery not configured; skipping push")
            return
        try:
            self.delivery.push(notification)
        except Exception:
            logger.exception("Realtime push failed for notification %s", notification.id)


def build_notification_router(session: Session) -> NotificationRouter:
    """Return a router wired to the configured delivery channel."""

    return NotificationRouter(session, delivery=get_delivery_channel())


def _validate_paging(page: int, size: int) -> None:
    if page < 0:
        raise NotificationValidationError("page must be zero or greater")
    if size < 1 or size > MAX_PAGE_SIZE:
        raise NotificationValidationError(f"size must be between 1 and {MAX_PAGE_SIZE}")


def _describe(target: Target) -> str:
    if isinstance(target, UserTarget):
        return f"user {target.user_id}"
    return f"role {target.role}"


__all__ = ["MAX_PAGE_SIZE", "NotificationRouter", "build_notification_router"]
