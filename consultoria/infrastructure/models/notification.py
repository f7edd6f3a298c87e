"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import expression

from consultoria.infrastructure.database import Base
from consultoria.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation of a notification addressed to a user or a role."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_target_user_created", "target_user_id", "created_at"),
        Index("ix_notification_target_role_created", "target_role", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    target_user_id = Column(Integer, nullable=True)
    target_role = Column(String(50), nullable=True)
    related_entity_id = Column(Integer, nullable=True)
    related_entity_type = Column(String(50), nullable=True)
    read = Column(
        "is_read",
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    extra_metadata = Column("metadata", Text, nullable=True)


__all__ = ["NotificationModel"]
