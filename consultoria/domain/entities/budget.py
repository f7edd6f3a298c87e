"""Domain entity representing a budget request."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Budget:
    """Budget request submitted by a client."""

    id: int | None
    client_id: int | None
    client_name: str | None
    title: str
    status: str
    created_at: datetime | None = None


__all__ = ["Budget"]
