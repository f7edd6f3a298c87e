"""FastAPI dependency utilities."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from consultoria.application.use_cases.notifications import (
    NotificationRouter,
    build_notification_router,
)
from consultoria.config import get_settings
from consultoria.infrastructure.database import get_db

DEFAULT_ROLE = "user"


@dataclass(frozen=True)
class Caller:
    """Identity resolved upstream by the authentication gateway."""

    user_id: int
    role: str


def resolve_caller(user_id: str | None, role: str | None) -> Caller:
    """Build a :class:`Caller` from raw identity values."""

    if user_id is None or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Identidad del usuario no proporcionada",
        )
    try:
        parsed_id = int(user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Identificador de usuario inválido",
        ) from exc
    normalized_role = (role or "").strip().lower() or DEFAULT_ROLE
    return Caller(user_id=parsed_id, role=normalized_role)


def get_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    """Return the caller identity carried by the ``X-User-Id``/``X-User-Role`` headers."""

    return resolve_caller(x_user_id, x_user_role)


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    """Ensure the caller presents the administrator role."""

    if caller.role != get_settings().admin_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No autorizado",
        )
    return caller


def get_notification_router(db: Session = Depends(get_db)) -> NotificationRouter:
    """Return a notification router bound to the request session."""

    return build_notification_router(db)
