"""Shared fixtures: a throwaway SQLite database and seeding helpers."""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "consultoria-notifications-test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("APP_TIMEZONE", "America/Bogota")
os.environ.setdefault("ADMIN_ROLE", "admin")

from consultoria.infrastructure import database  # noqa: E402
from consultoria.infrastructure.models import (  # noqa: E402
    BudgetModel,
    ClientModel,
    LoginHistoryModel,
    RoleModel,
    UserModel,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Prepare a fresh database for every test."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)


@pytest.fixture()
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def roles(db_session):
    """Create the ``admin`` and ``user`` roles and return them by alias."""

    created = {}
    for name, alias in (("Administrador", "admin"), ("Usuario", "user")):
        model = RoleModel(name=name, alias=alias)
        db_session.add(model)
        created[alias] = model
    db_session.commit()
    return created


@pytest.fixture()
def make_user(db_session, roles):
    counter = {"value": 0}

    def _make_user(
        *,
        role: str = "user",
        name: str | None = None,
        status: str = "active",
        registered_at: datetime | None = None,
    ) -> UserModel:
        counter["value"] += 1
        index = counter["value"]
        model = UserModel(
            role_id=roles[role].id,
            name=name or f"Usuario {index}",
            email=f"user{index}@example.com",
            status=status,
        )
        if registered_at is not None:
            model.registered_at = registered_at
        db_session.add(model)
        db_session.commit()
        db_session.refresh(model)
        return model

    return _make_user


@pytest.fixture()
def record_logins(db_session):
    def _record(user_id: int, *moments: datetime) -> None:
        for moment in moments:
            db_session.add(LoginHistoryModel(user_id=user_id, login_at=moment))
        db_session.commit()

    return _record


@pytest.fixture()
def make_client(db_session):
    def _make_client(name: str, *, last_contact: date | None = None) -> ClientModel:
        model = ClientModel(name=name, last_contact=last_contact)
        db_session.add(model)
        db_session.commit()
        db_session.refresh(model)
        return model

    return _make_client


@pytest.fixture()
def make_budget(db_session):
    def _make_budget(
        title: str, *, client_id: int | None = None, created_at: datetime | None = None
    ) -> BudgetModel:
        model = BudgetModel(title=title, client_id=client_id)
        if created_at is not None:
            model.created_at = created_at
        db_session.add(model)
        db_session.commit()
        db_session.refresh(model)
        return model

    return _make_budget
