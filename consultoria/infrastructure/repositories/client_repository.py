"""Counts over clients used by statistics runs."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from consultoria.infrastructure.models import ClientModel


class ClientRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def count(self) -> int:
        return self.session.query(ClientModel).count()

    def count_active_in_period(self, start: date, end: date) -> int:
        """Clients whose last contact falls between ``start`` and ``end`` inclusive."""

        return (
            self.session.query(ClientModel)
            .filter(ClientModel.last_contact.between(start, end))
            .count()
        )


__all__ = ["ClientRepository"]
