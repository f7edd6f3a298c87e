"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import anyio
from anyio import from_thread

from consultoria.config import get_settings
from consultoria.domain.entities import Notification, Target, UserTarget
from consultoria.domain.exceptions import DeliveryFailure

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class DeliveryChannel(Protocol):
    """Best-effort realtime path. Implementations must never raise."""

    def push(self, notification: Notification) -> None:
        ...


class NotificationPublisher:
    """Serialize notifications and schedule their delivery.

    A user target is delivered to that user's sockets, a role target to the
    sockets subscribed to the role topic. Each delivery is bounded by
    ``timeout`` seconds and abandoned on failure; clients recover the same
    data by polling the notification list.
    """

    def __init__(self, manager: NotificationConnectionManager, *, timeout: float) -> None:
        self._manager = manager
        self._timeout = timeout
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Use ``loop`` for pushes issued from threads anyio does not manage."""

        self._loop = loop

    def unbind_loop(self) -> None:
        self._loop = None

    def push(self, notification: Notification) -> None:
        """Schedule ``notification`` for realtime delivery, logging any failure."""

        try:
            self._dispatch(notification)
        except DeliveryFailure as exc:
            logger.warning("Realtime push skipped for notification %s: %s", notification.id, exc)
        except Exception:  # pragma: no cover - the push path must never break creation
            logger.exception("Unexpected error pushing notification %s", notification.id)

    def _dispatch(self, notification: Notification) -> None:
        if not self._manager.has_subscribers():
            logger.debug("No realtime subscribers; notification %s left for polling", notification.id)
            return

        message = {"type": "notification", "data": serialize_notification(notification)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._deliver, notification.target, message)
            except RuntimeError as exc:
                # Scheduler jobs run on plain threads; hand the push to the app loop.
                self._submit_to_bound_loop(notification.target, message, exc)
        else:
            loop.create_task(self._deliver(notification.target, message))

    def _submit_to_bound_loop(
        self, target: Target, message: dict[str, Any], cause: BaseException
    ) -> None:
        loop = self._loop
        if loop is None or loop.is_closed() or not loop.is_running():
            raise DeliveryFailure("no event loop reachable from this thread") from cause
        asyncio.run_coroutine_threadsafe(self._deliver(target, message), loop)

    async def _deliver(self, target: Target, message: dict[str, Any]) -> None:
        try:
            with anyio.fail_after(self._timeout):
                if isinstance(target, UserTarget):
                    delivered = await self._manager.send_to_user(target.user_id, message)
                else:
                    delivered = await self._manager.send_to_role(target.role, message)
        except TimeoutError:
            logger.warning(
                "Realtime push abandoned after %.1fs for %s", self._timeout, target
            )
            return
        logger.debug("Realtime push reached %d connection(s) for %s", delivered, target)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "type": notification.event_type,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority,
        "target_user_id": notification.target_user_id,
        "target_role": notification.target_role,
        "related_entity_id": notification.related_entity_id,
        "related_entity_type": notification.related_entity_type,
        "read": notification.read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "metadata": notification.metadata,
    }


notification_publisher = NotificationPublisher(
    notification_manager, timeout=get_settings().push_timeout_seconds
)


def get_delivery_channel() -> DeliveryChannel | None:
    """Return the configured delivery channel, or ``None`` when realtime is disabled."""

    if not get_settings().realtime_enabled:
        return None
    return notification_publisher


__all__ = [
    "DeliveryChannel",
    "NotificationPublisher",
    "notification_publisher",
    "get_delivery_channel",
    "serialize_notification",
]
