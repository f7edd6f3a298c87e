"""SQLAlchemy model for successful logins."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer

from consultoria.infrastructure.database import Base
from consultoria.utils import now_in_app_naive_datetime


class LoginHistoryModel(Base):
    """One row per successful login of a user."""

    __tablename__ = "login_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    login_at = Column(
        DateTime, nullable=False, default=now_in_app_naive_datetime, index=True
    )


__all__ = ["LoginHistoryModel"]
