"""Repository implementations for infrastructure layer."""

from .budget_repository import BudgetRepository
from .client_repository import ClientRepository
from .login_history_repository import LoginHistoryRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "BudgetRepository",
    "ClientRepository",
    "LoginHistoryRepository",
    "NotificationRepository",
    "UserRepository",
]
