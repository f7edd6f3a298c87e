"""SQLAlchemy model for budget requests."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from consultoria.infrastructure.database import Base
from consultoria.utils import now_in_app_naive_datetime


class BudgetModel(Base):
    """Budget requested by a client."""

    __tablename__ = "budget"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("client.id"), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    status = Column(String(30), nullable=False, default="PENDIENTE")
    created_at = Column(
        DateTime, nullable=False, default=now_in_app_naive_datetime, index=True
    )

    client = relationship("ClientModel", lazy="joined")


__all__ = ["BudgetModel"]
