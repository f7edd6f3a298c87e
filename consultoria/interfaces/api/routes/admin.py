"""Rutas de administración: bandeja de notificaciones y disparadores manuales."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from consultoria.application.use_cases.notifications import (
    MAX_PAGE_SIZE,
    AdminEventNotifier,
    NotificationRouter,
    build_admin_summary,
    run_daily_stats,
    run_monthly_stats,
    run_weekly_stats,
)
from consultoria.config import get_settings
from consultoria.domain.entities import Notification
from consultoria.domain.exceptions import NotificationNotFoundError
from consultoria.infrastructure.database import get_db
from consultoria.infrastructure.repositories import UserRepository
from consultoria.interfaces.api.dependencies import (
    Caller,
    get_notification_router,
    require_admin,
)
from consultoria.interfaces.api.schemas import (
    AdminSummaryRead,
    NotificationPageRead,
    NotificationRead,
    OperationResult,
)

from .notifications import notification_to_schema, page_to_schema

router = APIRouter(prefix="/admin/notifications", tags=["admin"])


def _require_admin_notification(notifications: NotificationRouter, notification_id: int) -> None:
    try:
        notification = notifications.get(notification_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada") from exc
    if notification.target_role != get_settings().admin_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No autorizado para modificar esta notificación",
        )


def _published(notification: Notification | None, what: str) -> NotificationRead:
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"No se pudo generar la notificación de {what}",
        )
    return notification_to_schema(notification)


@router.get("/", response_model=NotificationPageRead)
def list_admin_notifications(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationPageRead:
    """Devuelve las notificaciones dirigidas al rol administrador."""

    return page_to_schema(notifications.list_for_role(get_settings().admin_role, page, size))


@router.get("/stats/summary", response_model=AdminSummaryRead)
def read_admin_summary(
    _: Caller = Depends(require_admin),
    db: Session = Depends(get_db),
) -> AdminSummaryRead:
    """Resumen de usuarios y notificaciones pendientes para el panel de administración."""

    summary = build_admin_summary(db)
    return AdminSummaryRead(
        total_users=summary.total_users,
        active_users=summary.active_users,
        total_notifications=summary.total_notifications,
        unread_admin_notifications=summary.unread_admin_notifications,
    )


@router.delete("/", response_model=OperationResult)
def delete_admin_notifications(
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> OperationResult:
    deleted = notifications.delete_for_role(get_settings().admin_role)
    if deleted == 0:
        return OperationResult(
            message="No hay notificaciones de administradores para eliminar", affected=0
        )
    return OperationResult(
        message="Todas las notificaciones de administradores eliminadas correctamente",
        affected=deleted,
    )


@router.put("/{notification_id}/read", response_model=OperationResult)
def mark_admin_notification_read(
    notification_id: int,
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> OperationResult:
    _require_admin_notification(notifications, notification_id)
    notifications.mark_read(notification_id)
    return OperationResult(message="Notificación marcada como leída", notification_id=notification_id)


@router.delete("/{notification_id}", response_model=OperationResult)
def delete_admin_notification(
    notification_id: int,
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> OperationResult:
    _require_admin_notification(notifications, notification_id)
    notifications.delete(notification_id)
    return OperationResult(message="Notificación eliminada correctamente", notification_id=notification_id)


@router.post("/daily-stats", response_model=NotificationRead)
def send_daily_stats(_: Caller = Depends(require_admin)) -> NotificationRead:
    """Ejecuta manualmente el reporte diario."""

    return _published(run_daily_stats(), "estadísticas diarias")


@router.post("/weekly-stats", response_model=NotificationRead)
def send_weekly_stats(_: Caller = Depends(require_admin)) -> NotificationRead:
    return _published(run_weekly_stats(), "estadísticas semanales")


@router.post("/monthly-stats", response_model=NotificationRead)
def send_monthly_stats(_: Caller = Depends(require_admin)) -> NotificationRead:
    return _published(run_monthly_stats(), "estadísticas mensuales")


@router.post("/test/user-registration/{user_id}", response_model=NotificationRead)
def test_user_registration(
    user_id: int,
    _: Caller = Depends(require_admin),
    db: Session = Depends(get_db),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationRead:
    """Simula la notificación de un nuevo registro de usuario."""

    user = UserRepository(db).get(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")
    return _published(
        AdminEventNotifier(notifications).notify_new_user_registration(user), "registro"
    )


@router.post("/test/first-login/{user_id}", response_model=NotificationRead)
def test_first_login(
    user_id: int,
    _: Caller = Depends(require_admin),
    db: Session = Depends(get_db),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationRead:
    user = UserRepository(db).get(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")
    return _published(AdminEventNotifier(notifications).notify_first_login(user), "primer acceso")


@router.post("/test/budget-request", response_model=NotificationRead)
def test_budget_request(
    budget_id: int = Query(...),
    client_name: str = Query(...),
    project_name: str = Query(...),
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationRead:
    notification = AdminEventNotifier(notifications).notify_new_budget_request(
        budget_id, client_name, project_name
    )
    return _published(notification, "solicitud de presupuesto")


@router.post("/test/system-error", response_model=NotificationRead)
def test_system_error(
    error_type: str = Query(...),
    error_message: str = Query(...),
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationRead:
    notification = AdminEventNotifier(notifications).notify_system_error(error_type, error_message)
    return _published(notification, "error del sistema")


@router.post("/test/unusual-activity", response_model=NotificationRead)
def test_unusual_activity(
    activity_type: str = Query(...),
    count: int = Query(..., ge=0),
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationRead:
    notification = AdminEventNotifier(notifications).notify_unusual_activity(activity_type, count)
    return _published(notification, "actividad inusual")


__all__ = ["router"]
