"""Use case for registering a successful login of a user."""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from consultoria.application.use_cases.notifications import (
    AdminEventNotifier,
    build_notification_router,
)
from consultoria.domain.entities import PRIORITY_MEDIUM, UserTarget
from consultoria.infrastructure.database import SessionLocal
from consultoria.infrastructure.repositories import LoginHistoryRepository, UserRepository
from consultoria.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def record_login(
    session: Session,
    user_id: int,
    *,
    session_factory: Callable[[], Session] = SessionLocal,
) -> bool:
    """Persist the login and announce it when it is the user's first one.

    Returns ``True`` when this was the first login. Notifications go through
    a session of their own; their failures are logged and never undo the
    login.
    """

    repository = UserRepository(session)
    user = repository.get(user_id)
    if not user:
        return False

    now = now_in_app_timezone()
    history = LoginHistoryRepository(session)
    history.record(user_id, now)
    repository.update_last_login(user_id, now)

    if history.count_for_user(user_id) != 1:
        return False

    notification_session = session_factory()
    try:
        router = build_notification_router(notification_session)
        try:
            router.create(
                event_type="FIRST_LOGIN",
                title="¡Primer acceso exitoso!",
                message="Has completado tu primer acceso al sistema. ¡Bienvenido!",
                priority=PRIORITY_MEDIUM,
                target=UserTarget(user_id),
            )
        except Exception:
            logger.exception("No se pudo crear la notificación de primer acceso para %s", user_id)
            notification_session.rollback()
        AdminEventNotifier(router).notify_first_login(user)
    finally:
        notification_session.close()
    return True
