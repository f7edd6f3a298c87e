"""Persistence layer for user data."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session, joinedload

from consultoria.domain.entities import Role, User
from consultoria.infrastructure.models import UserModel
from consultoria.utils import ensure_app_naive_datetime, ensure_app_timezone


class UserRepository:
    """Lookups and counts over users needed by notifications."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = (
            self.session.query(UserModel)
            .options(joinedload(UserModel.role))
            .filter(UserModel.id == user_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def update_last_login(self, user_id: int, when: datetime) -> None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        model.last_login = ensure_app_naive_datetime(when)
        self.session.add(model)
        self.session.commit()

    def count(self) -> int:
        return self.session.query(UserModel).count()

    def count_by_status(self, status: str) -> int:
        return self.session.query(UserModel).filter(UserModel.status == status).count()

    def count_registered_between(self, start: datetime, end: datetime) -> int:
        return (
            self.session.query(UserModel)
            .filter(
                UserModel.registered_at >= ensure_app_naive_datetime(start),
                UserModel.registered_at <= ensure_app_naive_datetime(end),
            )
            .count()
        )

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        role = Role(id=model.role.id, name=model.role.name, alias=model.role.alias)
        return User(
            id=model.id,
            role=role,
            name=model.name,
            email=model.email,
            status=model.status,
            registered_at=ensure_app_timezone(model.registered_at),
            last_login=ensure_app_timezone(model.last_login),
        )


__all__ = ["UserRepository"]
