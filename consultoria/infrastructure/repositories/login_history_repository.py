"""Persistence helpers for login history rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from consultoria.infrastructure.models import LoginHistoryModel
from consultoria.utils import ensure_app_naive_datetime


class LoginHistoryRepository:
    """Record logins and count them over time windows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def record(self, user_id: int, login_at: datetime) -> None:
        model = LoginHistoryModel(
            user_id=user_id, login_at=ensure_app_naive_datetime(login_at)
        )
        self.session.add(model)
        self.session.commit()

    def count_for_user(self, user_id: int) -> int:
        return (
            self.session.query(LoginHistoryModel)
            .filter(LoginHistoryModel.user_id == user_id)
            .count()
        )

    def count_unique_users_between(self, start: datetime, end: datetime) -> int:
        """Return how many distinct users logged in between ``start`` and ``end``."""

        result = (
            self.session.query(func.count(func.distinct(LoginHistoryModel.user_id)))
            .filter(
                LoginHistoryModel.login_at >= ensure_app_naive_datetime(start),
                LoginHistoryModel.login_at <= ensure_app_naive_datetime(end),
            )
            .scalar()
        )
        return int(result or 0)


__all__ = ["LoginHistoryRepository"]
