"""Use case for the administrator dashboard summary."""

from sqlalchemy.orm import Session

from consultoria.config import get_settings
from consultoria.domain.entities import USER_STATUS_ACTIVE, AdminSummary
from consultoria.infrastructure.repositories import NotificationRepository, UserRepository


def build_admin_summary(session: Session, *, admin_role: str | None = None) -> AdminSummary:
    """Return user totals plus the notification backlog of the admin role."""

    users = UserRepository(session)
    notifications = NotificationRepository(session)
    return AdminSummary(
        total_users=users.count(),
        active_users=users.count_by_status(USER_STATUS_ACTIVE),
        total_notifications=notifications.count(),
        unread_admin_notifications=notifications.count_unread_for_role(
            admin_role or get_settings().admin_role
        ),
    )


__all__ = ["build_admin_summary"]
