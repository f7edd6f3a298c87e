"""Domain entities exposed by the application."""

from .budget import Budget
from .notification import (
    AdminSummary,
    PRIORITIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    Notification,
    NotificationPage,
    NotificationStats,
    RoleTarget,
    StatsSummary,
    StatsWindow,
    Target,
    UserTarget,
    build_target,
)
from .role import Role
from .user import USER_STATUS_ACTIVE, User

__all__ = [
    "AdminSummary",
    "Budget",
    "Notification",
    "NotificationPage",
    "NotificationStats",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "Role",
    "RoleTarget",
    "StatsSummary",
    "StatsWindow",
    "Target",
    "User",
    "USER_STATUS_ACTIVE",
    "UserTarget",
    "build_target",
]
