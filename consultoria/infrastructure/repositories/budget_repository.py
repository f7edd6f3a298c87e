"""Persistence helpers for budget requests."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from consultoria.domain.entities import Budget
from consultoria.infrastructure.models import BudgetModel
from consultoria.utils import ensure_app_naive_datetime, ensure_app_timezone


class BudgetRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, budget_id: int) -> Budget | None:
        model = self.session.get(BudgetModel, budget_id)
        return self._to_entity(model) if model else None

    def count_created_between(self, start: datetime, end: datetime) -> int:
        return (
            self.session.query(BudgetModel)
            .filter(
                BudgetModel.created_at >= ensure_app_naive_datetime(start),
                BudgetModel.created_at <= ensure_app_naive_datetime(end),
            )
            .count()
        )

    @staticmethod
    def _to_entity(model: BudgetModel) -> Budget:
        return Budget(
            id=model.id,
            client_id=model.client_id,
            client_name=model.client.name if model.client else None,
            title=model.title,
            status=model.status,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["BudgetRepository"]
