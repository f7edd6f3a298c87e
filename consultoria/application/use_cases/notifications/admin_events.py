"""Administrator notifications for account, budget and system events."""

from __future__ import annotations

import logging

from consultoria.config import get_settings
from consultoria.domain.entities import (
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    Notification,
    RoleTarget,
    User,
)
from consultoria.utils import format_display_datetime, now_in_app_timezone

from .router import NotificationRouter

logger = logging.getLogger(__name__)


class AdminEventNotifier:
    """Stateless facade turning domain events into admin broadcasts.

    Every method returns the created notification, or ``None`` when it could
    not be created. Failures are logged and never reach the caller, so the
    surrounding business operation always completes.

    A failed write rolls back the router's session, so the router must own a
    session separate from the one carrying the business operation.
    """

    def __init__(self, router: NotificationRouter, *, admin_role: str | None = None) -> None:
        self.router = router
        self.admin_role = admin_role or get_settings().admin_role

    def notify_new_user_registration(self, user: User) -> Notification | None:
        message = (
            "Un nuevo usuario se ha registrado en el sistema:\n\n"
            f"Nombre: {user.name}\n"
            f"Email: {user.email}\n"
            f"Rol: {user.role.display_name()}\n"
            f"Fecha: {_now_label()}\n\n"
            "Revisa el panel de administración para más detalles."
        )
        return self._emit(
            "USER_REGISTRATION",
            "Nuevo Usuario Registrado",
            message,
            PRIORITY_MEDIUM,
            related_entity_id=user.id,
            related_entity_type="USER",
        )

    def notify_first_login(self, user: User) -> Notification | None:
        message = (
            "Un usuario ha completado su primer acceso:\n\n"
            f"Usuario: {user.name}\n"
            f"Email: {user.email}\n"
            f"Rol: {user.role.display_name()}\n"
            f"Primer acceso: {_now_label()}"
        )
        return self._emit(
            "FIRST_LOGIN",
            "Primer Acceso de Usuario",
            message,
            PRIORITY_LOW,
            related_entity_id=user.id,
            related_entity_type="USER",
        )

    def notify_new_budget_request(
        self, budget_id: int | None, client_name: str, project_name: str
    ) -> Notification | None:
        message = (
            "Se ha recibido una nueva solicitud de presupuesto:\n\n"
            f"Cliente: {client_name}\n"
            f"Proyecto: {project_name}\n"
            f"Fecha: {_now_label()}\n\n"
            "Revisa los detalles en el panel de presupuestos."
        )
        return self._emit(
            "BUDGET_REQUEST",
            "Nueva Solicitud de Presupuesto",
            message,
            PRIORITY_HIGH,
            related_entity_id=budget_id,
            related_entity_type="BUDGET",
        )

    def notify_system_error(self, error_type: str, error_message: str) -> Notification | None:
        message = (
            "Se ha detectado un error crítico:\n\n"
            f"Tipo: {error_type}\n"
            f"Mensaje: {error_message}\n"
            f"Fecha: {_now_label(with_seconds=True)}\n\n"
            "Revisa los logs del sistema inmediatamente."
        )
        return self._emit("SYSTEM_ERROR", "Error Crítico del Sistema", message, PRIORITY_HIGH)

    def notify_unusual_activity(self, activity_type: str, count: int) -> Notification | None:
        message = (
            "Se ha detectado actividad inusual en el sistema:\n\n"
            f"Tipo de actividad: {activity_type}\n"
            f"Cantidad: {count}\n"
            f"Detectado: {_now_label()}\n\n"
            "Considera revisar los logs para más detalles."
        )
        return self._emit(
            "UNUSUAL_ACTIVITY", "Actividad Inusual Detectada", message, PRIORITY_MEDIUM
        )

    def _emit(
        self,
        event_type: str,
        title: str,
        message: str,
        priority: str,
        *,
        related_entity_id: int | None = None,
        related_entity_type: str | None = None,
    ) -> Notification | None:
        try:
            notification = self.router.create(
                event_type=event_type,
                title=title,
                message=message,
                priority=priority,
                target=RoleTarget(self.admin_role),
                related_entity_id=related_entity_id,
                related_entity_type=related_entity_type,
            )
        except Exception:
            logger.exception("No se pudo notificar a los administradores (%s)", event_type)
            self.router.session.rollback()
            return None
        logger.info("Administradores notificados: %s", event_type)
        return notification


def _now_label(*, with_seconds: bool = False) -> str:
    return format_display_datetime(now_in_app_timezone(), with_seconds=with_seconds)


__all__ = ["AdminEventNotifier"]
