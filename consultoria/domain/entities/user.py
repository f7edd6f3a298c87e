"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

from .role import Role

USER_STATUS_ACTIVE = "active"


@dataclass
class User:
    """Attributes of an application user needed to describe account events."""

    id: int | None
    role: Role
    name: str
    email: str
    status: str = USER_STATUS_ACTIVE
    registered_at: datetime | None = None
    last_login: datetime | None = None

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role alias matches ``alias``."""

        return self.role.alias.lower() == alias.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role("admin")
