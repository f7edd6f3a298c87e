"""SQLAlchemy model for the user table."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from consultoria.infrastructure.database import Base
from consultoria.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of the system user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    role_id = Column(Integer, ForeignKey("role.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active")
    registered_at = Column(
        DateTime, nullable=False, default=now_in_app_naive_datetime, index=True
    )
    last_login = Column(DateTime, nullable=True)

    role = relationship("RoleModel", lazy="joined")


__all__ = ["UserModel"]
