"""SQLAlchemy model for clients, reduced to what statistics runs query."""

from sqlalchemy import Column, Date, DateTime, Integer, String

from consultoria.infrastructure.database import Base
from consultoria.utils import now_in_app_naive_datetime


class ClientModel(Base):
    __tablename__ = "client"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(120), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    last_contact = Column(Date, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["ClientModel"]
