"""Endpoints and websocket handler for the caller's notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from consultoria.application.use_cases.notifications import (
    MAX_PAGE_SIZE,
    NotificationRouter,
    build_notification_router,
    create_system_notification,
)
from consultoria.domain.entities import Notification, NotificationPage, build_target
from consultoria.domain.exceptions import (
    NotificationNotFoundError,
    NotificationValidationError,
)
from consultoria.infrastructure.database import SessionLocal
from consultoria.infrastructure.notifications import notification_manager, serialize_notification
from consultoria.interfaces.api.dependencies import (
    Caller,
    get_caller,
    get_notification_router,
    require_admin,
    resolve_caller,
)
from consultoria.interfaces.api.schemas import (
    NotificationCreate,
    NotificationMarkReadRequest,
    NotificationPageRead,
    NotificationRead,
    NotificationStatsRead,
    OperationResult,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        type=notification.event_type,
        title=notification.title,
        message=notification.message,
        priority=notification.priority,
        target_user_id=notification.target_user_id,
        target_role=notification.target_role,
        related_entity_id=notification.related_entity_id,
        related_entity_type=notification.related_entity_type,
        read=notification.read,
        created_at=notification.created_at,
        metadata=notification.metadata,
    )


def page_to_schema(page: NotificationPage) -> NotificationPageRead:
    return NotificationPageRead(
        items=[notification_to_schema(item) for item in page.items],
        page=page.page,
        size=page.size,
        total=page.total,
        total_pages=page.total_pages,
    )


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    caller: Caller = Depends(get_caller),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationPageRead:
    """Devuelve las notificaciones visibles para el usuario, de la más reciente a la más antigua."""

    result = notifications.list(caller.user_id, caller.role, page, size)
    return page_to_schema(result)


@router.get("/stats", response_model=NotificationStatsRead)
def read_notification_stats(
    caller: Caller = Depends(get_caller),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationStatsRead:
    stats = notifications.stats(caller.user_id, caller.role)
    return NotificationStatsRead(unread=stats.unread, total=stats.total)


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    caller: Caller = Depends(get_caller),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationRead:
    """Crea una notificación dirigida a un usuario o a un rol."""

    try:
        created = notifications.create(
            event_type=payload.type,
            title=payload.title,
            message=payload.message,
            priority=payload.priority,
            target=build_target(payload.target_user_id, payload.target_role),
            related_entity_id=payload.related_entity_id,
            related_entity_type=payload.related_entity_type,
            metadata=payload.metadata,
        )
    except NotificationValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    logger.info("Usuario %s creó la notificación %s", caller.user_id, created.id)
    return notification_to_schema(created)


@router.post("/system", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_system_announcement(
    title: str = Query(...),
    message: str = Query(...),
    target_role: str = Query("user"),
    _: Caller = Depends(require_admin),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> NotificationRead:
    """Publica un anuncio del sistema para todos los usuarios de un rol."""

    try:
        created = create_system_notification(
            notifications, title=title, message=message, target_role=target_role
        )
    except NotificationValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return notification_to_schema(created)


@router.put("/read-all", response_model=OperationResult)
def mark_all_notifications_read(
    caller: Caller = Depends(get_caller),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> OperationResult:
    updated = notifications.mark_all_read(caller.user_id, caller.role)
    return OperationResult(
        message="Todas las notificaciones han sido marcadas como leídas",
        affected=updated,
    )


@router.post("/read", response_model=OperationResult)
def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    caller: Caller = Depends(get_caller),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> OperationResult:
    """Marca como leídas las notificaciones indicadas que el usuario puede ver."""

    updated = notifications.mark_many_read(payload.unique_ids(), caller.user_id, caller.role)
    return OperationResult(message="Notificaciones marcadas como leídas", affected=updated)


@router.put("/{notification_id}/read", response_model=OperationResult)
def mark_notification_read(
    notification_id: int,
    _: Caller = Depends(get_caller),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> OperationResult:
    try:
        notifications.mark_read(notification_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada") from exc
    return OperationResult(
        message="Notificación marcada como leída", notification_id=notification_id
    )


@router.delete("/{notification_id}", response_model=OperationResult)
def delete_notification(
    notification_id: int,
    _: Caller = Depends(get_caller),
    notifications: NotificationRouter = Depends(get_notification_router),
) -> OperationResult:
    try:
        notifications.delete(notification_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada") from exc
    return OperationResult(
        message="Notificación eliminada correctamente", notification_id=notification_id
    )


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the connected user.

    The stream is a hint: clients re-fetch the list when a message arrives and
    keep polling when the socket is unavailable.
    """

    try:
        caller = resolve_caller(
            websocket.query_params.get("user_id"), websocket.query_params.get("role")
        )
    except HTTPException:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        page = build_notification_router(session).list(caller.user_id, caller.role, 0, MAX_PAGE_SIZE)
        pending = [serialize_notification(n) for n in page.items if not n.read]
    except Exception:  # pragma: no cover - database unavailable
        logger.exception("No se pudieron cargar las notificaciones pendientes")
        await websocket.close(code=1011)
        return
    finally:
        session.close()

    await notification_manager.connect(caller.user_id, caller.role, websocket)
    try:
        if pending:
            await websocket.send_json({"type": "init", "data": pending})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        build_notification_router(ack_session).mark_many_read(
                            [i for i in ids if isinstance(i, int)], caller.user_id, caller.role
                        )
                    finally:
                        ack_session.close()
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(caller.user_id, caller.role, websocket)
    except Exception:  # pragma: no cover - unexpected socket errors
        notification_manager.disconnect(caller.user_id, caller.role, websocket)
        raise


__all__ = ["router", "notification_to_schema", "page_to_schema"]
