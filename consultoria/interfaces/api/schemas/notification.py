"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationCreate(BaseModel):
    """Payload used to create a notification.

    Blank text and missing targets are accepted here and rejected by the
    notification router, so the API reports them as a 400 like any other
    validation error.
    """

    type: str = Field(default="GENERAL", max_length=50)
    title: str | None = None
    message: str | None = None
    priority: str = Field(default="medium")
    target_user_id: int | None = None
    target_role: str | None = Field(default=None, max_length=50)
    related_entity_id: int | None = None
    related_entity_type: str | None = Field(default=None, max_length=50)
    metadata: str | None = None


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Identificadores de notificaciones")

    def unique_ids(self) -> list[int]:
        """Return the list of identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    title: str
    message: str
    priority: str
    target_user_id: int | None = None
    target_role: str | None = None
    related_entity_id: int | None = None
    related_entity_type: str | None = None
    read: bool
    created_at: datetime
    metadata: str | None = None


class NotificationPageRead(BaseModel):
    items: list[NotificationRead]
    page: int
    size: int
    total: int
    total_pages: int


class NotificationStatsRead(BaseModel):
    unread: int
    total: int


class AdminSummaryRead(BaseModel):
    """Counters shown on the administrator dashboard."""

    total_users: int
    active_users: int
    total_notifications: int
    unread_admin_notifications: int


class OperationResult(BaseModel):
    """Outcome of a state change requested by the client."""

    success: bool = True
    message: str
    notification_id: int | None = None
    affected: int | None = None


__all__ = [
    "AdminSummaryRead",
    "NotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationPageRead",
    "NotificationRead",
    "NotificationStatsRead",
    "OperationResult",
]
