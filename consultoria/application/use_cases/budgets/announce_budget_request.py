"""Use case for announcing a new budget request to administrators."""

from collections.abc import Callable

from sqlalchemy.orm import Session

from consultoria.application.use_cases.notifications import (
    AdminEventNotifier,
    build_notification_router,
)
from consultoria.domain.entities import Notification
from consultoria.infrastructure.database import SessionLocal
from consultoria.infrastructure.repositories import BudgetRepository


def announce_budget_request(
    session: Session,
    budget_id: int,
    *,
    session_factory: Callable[[], Session] = SessionLocal,
) -> Notification | None:
    """Notify administrators that ``budget_id`` was requested.

    The notification is written through its own session, so pending work in
    ``session`` is neither committed nor rolled back here.
    """

    budget = BudgetRepository(session).get(budget_id)
    if budget is None:
        raise ValueError("Presupuesto no encontrado")

    notification_session = session_factory()
    try:
        notifier = AdminEventNotifier(build_notification_router(notification_session))
        return notifier.notify_new_budget_request(
            budget.id, budget.client_name or "Cliente sin nombre", budget.title
        )
    finally:
        notification_session.close()
