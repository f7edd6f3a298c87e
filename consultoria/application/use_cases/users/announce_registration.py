"""Use case for announcing a newly registered user."""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from consultoria.application.use_cases.notifications import (
    AdminEventNotifier,
    build_notification_router,
    create_welcome_notification,
)
from consultoria.infrastructure.database import SessionLocal
from consultoria.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)


def announce_registration(
    session: Session,
    user_id: int,
    *,
    session_factory: Callable[[], Session] = SessionLocal,
) -> None:
    """Welcome the user and let administrators know about the registration."""

    user = UserRepository(session).get(user_id)
    if user is None:
        msg = f"User with id {user_id} not found"
        raise ValueError(msg)

    notification_session = session_factory()
    try:
        router = build_notification_router(notification_session)
        try:
            create_welcome_notification(router, user_id=user_id, user_name=user.name)
        except Exception:
            logger.exception("No se pudo crear la notificación de bienvenida para %s", user_id)
            notification_session.rollback()
        AdminEventNotifier(router).notify_new_user_registration(user)
    finally:
        notification_session.close()
