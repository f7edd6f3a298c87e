"""Domain entities describing notifications and their audience."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from consultoria.domain.exceptions import NotificationValidationError

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITIES = frozenset({PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH})


@dataclass(frozen=True)
class UserTarget:
    """Private notification addressed to a single user."""

    user_id: int


@dataclass(frozen=True)
class RoleTarget:
    """Broadcast visible to every caller presenting ``role``."""

    role: str

    def __post_init__(self) -> None:
        if not isinstance(self.role, str) or not self.role.strip():
            raise NotificationValidationError("A role target requires a non-empty role")
        object.__setattr__(self, "role", self.role.strip())


Target = Union[UserTarget, RoleTarget]


def build_target(user_id: int | None = None, role: str | None = None) -> Target:
    """Return the target for the given addressing fields.

    A user id takes precedence over a role, mirroring the visibility rule used
    when listing notifications.
    """

    if user_id is not None:
        return UserTarget(user_id=user_id)
    if role is not None and role.strip():
        return RoleTarget(role=role)
    raise NotificationValidationError("Either a target user id or a target role is required")


@dataclass
class Notification:
    """Append-only event addressed to a user or broadcast to a role."""

    id: int | None
    target: Target
    event_type: str
    title: str
    message: str
    priority: str = PRIORITY_MEDIUM
    related_entity_id: int | None = None
    related_entity_type: str | None = None
    read: bool = False
    created_at: datetime | None = None
    metadata: str | None = None

    @property
    def target_user_id(self) -> int | None:
        return self.target.user_id if isinstance(self.target, UserTarget) else None

    @property
    def target_role(self) -> str | None:
        return self.target.role if isinstance(self.target, RoleTarget) else None


@dataclass
class NotificationPage:
    """A page of notifications visible to a caller."""

    items: list[Notification]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size


@dataclass(frozen=True)
class NotificationStats:
    """Unread and total counts for a caller."""

    unread: int
    total: int


@dataclass(frozen=True)
class StatsWindow:
    """Time range queried by a statistics run."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class AdminSummary:
    """Snapshot of users and notifications shown on the admin dashboard."""

    total_users: int
    active_users: int
    total_notifications: int
    unread_admin_notifications: int


@dataclass
class StatsSummary:
    """Counts collected for a statistics window."""

    window: StatsWindow
    new_users: int
    unique_logins: int
    new_budgets: int
    extra: dict[str, int] = field(default_factory=dict)


__all__ = [
    "AdminSummary",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_HIGH",
    "PRIORITIES",
    "UserTarget",
    "RoleTarget",
    "Target",
    "build_target",
    "Notification",
    "NotificationPage",
    "NotificationStats",
    "StatsWindow",
    "StatsSummary",
]
