"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session

from consultoria.domain.entities import Notification, build_target
from consultoria.infrastructure.models import NotificationModel
from consultoria.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


def visible_to(user_id: int, role: str | None):
    """SQL predicate selecting the notifications a caller may see.

    A row is visible when it is addressed to ``user_id`` or when it carries no
    user target and is broadcast to ``role``.
    """

    return or_(
        NotificationModel.target_user_id == user_id,
        and_(
            NotificationModel.target_user_id.is_(None),
            NotificationModel.target_role == role,
        ),
    )


class NotificationRepository:
    """Provide storage operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_visible(
        self,
        user_id: int,
        role: str | None,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[Notification]:
        query = self._ordered(
            self.session.query(NotificationModel).filter(visible_to(user_id, role))
        )
        models = query.offset(offset).limit(limit).all()
        return [self._to_entity(model) for model in models]

    def count_visible(self, user_id: int, role: str | None) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(visible_to(user_id, role))
            .count()
        )

    def count_unread_visible(self, user_id: int, role: str | None) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(visible_to(user_id, role))
            .filter(NotificationModel.read.is_(False))
            .count()
        )

    def mark_read(self, notification_id: int) -> bool:
        """Flag ``notification_id`` as read. Returns ``False`` when it does not exist."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        if not model.read:
            model.read = True
            self.session.add(model)
            self.session.commit()
        return True

    def mark_read_many(self, notification_ids: Sequence[int], *, user_id: int, role: str | None) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids), visible_to(user_id, role))
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def mark_all_read(self, user_id: int, role: str | None) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(visible_to(user_id, role))
            .filter(NotificationModel.read.is_(False))
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def delete(self, notification_id: int) -> bool:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def list_for_role(
        self, role: str, *, offset: int = 0, limit: int = 20
    ) -> Sequence[Notification]:
        query = self._ordered(
            self.session.query(NotificationModel).filter(NotificationModel.target_role == role)
        )
        return [self._to_entity(model) for model in query.offset(offset).limit(limit).all()]

    def count_for_role(self, role: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.target_role == role)
            .count()
        )

    def count(self) -> int:
        return self.session.query(NotificationModel).count()

    def count_unread_for_role(self, role: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.target_role == role)
            .filter(NotificationModel.read.is_(False))
            .count()
        )

    def delete_for_role(self, role: str) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.target_role == role)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @staticmethod
    def _ordered(query: Query) -> Query:
        return query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.type = notification.event_type
        model.title = notification.title
        model.message = notification.message
        model.priority = notification.priority
        model.target_user_id = notification.target_user_id
        model.target_role = notification.target_role
        model.related_entity_id = notification.related_entity_id
        model.related_entity_type = notification.related_entity_type
        model.read = bool(notification.read)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.extra_metadata = notification.metadata

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            target=build_target(model.target_user_id, model.target_role),
            event_type=model.type,
            title=model.title,
            message=model.message,
            priority=model.priority,
            related_entity_id=model.related_entity_id,
            related_entity_type=model.related_entity_type,
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
            metadata=model.extra_metadata,
        )


__all__ = ["NotificationRepository", "visible_to"]
