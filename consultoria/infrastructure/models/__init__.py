"""ORM models used by the application infrastructure."""

from .budget import BudgetModel
from .client import ClientModel
from .login_history import LoginHistoryModel
from .notification import NotificationModel
from .role import RoleModel
from .user import UserModel

__all__ = [
    "BudgetModel",
    "ClientModel",
    "LoginHistoryModel",
    "NotificationModel",
    "RoleModel",
    "UserModel",
]
