"""Utility helpers to generate notifications for budget, ticket and project events."""

from __future__ import annotations

import logging

from consultoria.config import get_settings
from consultoria.domain.entities import (
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    Notification,
    RoleTarget,
    UserTarget,
)

from .router import NotificationRouter

logger = logging.getLogger(__name__)

_BUDGET_STATUS_EVENTS = {
    "APROBADO": ("BUDGET_APPROVED", "Presupuesto Aprobado", "ha sido aprobado", PRIORITY_HIGH),
    "RECHAZADO": ("BUDGET_REJECTED", "Presupuesto Rechazado", "ha sido rechazado", PRIORITY_MEDIUM),
    "EN_REVISION": (
        "BUDGET_IN_REVIEW",
        "Presupuesto en Revisión",
        "está siendo revisado",
        PRIORITY_MEDIUM,
    ),
}
_BUDGET_DEFAULT_EVENT = ("BUDGET_UPDATED", "Presupuesto Actualizado", "ha sido actualizado", PRIORITY_LOW)

_TICKET_STATUS_EVENTS = {
    "resolved": ("TICKET_RESOLVED", "Ticket Resuelto", "ha sido resuelto"),
    "closed": ("TICKET_CLOSED", "Ticket Cerrado", "ha sido cerrado"),
}
_TICKET_DEFAULT_EVENT = ("TICKET_UPDATED", "Ticket Actualizado", "ha sido actualizado")

_PROJECT_UPDATE_EVENTS = {
    "milestone": (
        "PROJECT_MILESTONE",
        "Hito del Proyecto Completado",
        'Se ha completado un hito en el proyecto "{title}"',
    ),
    "completed": ("PROJECT_COMPLETED", "Proyecto Completado", 'El proyecto "{title}" ha sido completado'),
    "started": ("PROJECT_STARTED", "Proyecto Iniciado", 'El proyecto "{title}" ha comenzado'),
}
_PROJECT_DEFAULT_EVENT = (
    "PROJECT_UPDATE",
    "Actualización del Proyecto",
    'El proyecto "{title}" ha sido actualizado',
)


def notify_new_budget(
    router: NotificationRouter, *, budget_id: int, budget_title: str
) -> Notification | None:
    """Tell administrators that a budget awaits approval.

    Budget creation must not fail because of this notification, so errors are
    logged and ``None`` is returned. The router's session is rolled back on
    failure and committed on success, so it should not be the session holding
    the budget.
    """

    try:
        return router.create(
            event_type="BUDGET_PENDING",
            title="Nuevo Presupuesto Pendiente",
            message=f'Nuevo presupuesto "{budget_title}" requiere aprobación',
            priority=PRIORITY_HIGH,
            target=RoleTarget(get_settings().admin_role),
            related_entity_id=budget_id,
            related_entity_type="BUDGET",
        )
    except Exception:
        logger.exception("Error creando notificación de nuevo presupuesto %s", budget_id)
        router.session.rollback()
        return None


def notify_budget_update(
    router: NotificationRouter,
    *,
    budget_id: int,
    client_id: int,
    status: str,
    budget_title: str,
) -> Notification:
    """Inform the client that the status of their budget changed."""

    event_type, title, detail, priority = _BUDGET_STATUS_EVENTS.get(
        (status or "").upper(), _BUDGET_DEFAULT_EVENT
    )
    return router.create(
        event_type=event_type,
        title=title,
        message=f'Tu presupuesto "{budget_title}" {detail}',
        priority=priority,
        target=UserTarget(client_id),
        related_entity_id=budget_id,
        related_entity_type="BUDGET",
    )


def notify_new_ticket(
    router: NotificationRouter, *, ticket_id: int, ticket_title: str
) -> Notification:
    return router.create(
        event_type="TICKET_NEW",
        title="Nuevo Ticket de Soporte",
        message=f'Nuevo ticket "{ticket_title}" requiere atención',
        priority=PRIORITY_HIGH,
        target=RoleTarget(get_settings().admin_role),
        related_entity_id=ticket_id,
        related_entity_type="TICKET",
    )


def notify_ticket_update(
    router: NotificationRouter,
    *,
    ticket_id: int,
    client_id: int,
    status: str,
    ticket_title: str,
) -> Notification:
    event_type, title, detail = _TICKET_STATUS_EVENTS.get(
        (status or "").lower(), _TICKET_DEFAULT_EVENT
    )
    return router.create(
        event_type=event_type,
        title=title,
        message=f'Tu ticket "{ticket_title}" {detail}',
        priority=PRIORITY_MEDIUM,
        target=UserTarget(client_id),
        related_entity_id=ticket_id,
        related_entity_type="TICKET",
    )


def notify_project_update(
    router: NotificationRouter,
    *,
    project_id: int,
    client_id: int,
    update_type: str,
    project_title: str,
) -> Notification:
    event_type, title, template = _PROJECT_UPDATE_EVENTS.get(update_type, _PROJECT_DEFAULT_EVENT)
    return router.create(
        event_type=event_type,
        title=title,
        message=template.format(title=project_title),
        priority=PRIORITY_MEDIUM,
        target=UserTarget(client_id),
        related_entity_id=project_id,
        related_entity_type="PROJECT",
    )


def create_system_notification(
    router: NotificationRouter, *, title: str, message: str, target_role: str = "user"
) -> Notification:
    """Broadcast an announcement to every user presenting ``target_role``."""

    return router.create(
        event_type="SYSTEM_ANNOUNCEMENT",
        title=title,
        message=message,
        priority=PRIORITY_MEDIUM,
        target=RoleTarget(target_role),
    )


def create_welcome_notification(
    router: NotificationRouter, *, user_id: int, user_name: str
) -> Notification:
    return router.create(
        event_type="WELCOME",
        title="¡Bienvenido al Sistema!",
        message=(
            f"Hola {user_name}, bienvenido a nuestro sistema de gestión. "
            "Aquí podrás gestionar tus presupuestos y proyectos."
        ),
        priority=PRIORITY_LOW,
        target=UserTarget(user_id),
    )


__all__ = [
    "notify_new_budget",
    "notify_budget_update",
    "notify_new_ticket",
    "notify_ticket_update",
    "notify_project_update",
    "create_system_notification",
    "create_welcome_notification",
]
