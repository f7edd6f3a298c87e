"""Public helpers for emitting and querying notifications."""

from .admin_events import AdminEventNotifier
from .events import (
    create_system_notification,
    create_welcome_notification,
    notify_budget_update,
    notify_new_budget,
    notify_new_ticket,
    notify_project_update,
    notify_ticket_update,
)
from .router import MAX_PAGE_SIZE, NotificationRouter, build_notification_router
from .summary import build_admin_summary
from .stats import (
    DAILY_STATS,
    MONTHLY_STATS,
    WEEKLY_STATS,
    run_daily_stats,
    run_monthly_stats,
    run_stats,
    run_weekly_stats,
)

__all__ = [
    "AdminEventNotifier",
    "NotificationRouter",
    "MAX_PAGE_SIZE",
    "build_notification_router",
    "build_admin_summary",
    "create_system_notification",
    "create_welcome_notification",
    "notify_budget_update",
    "notify_new_budget",
    "notify_new_ticket",
    "notify_project_update",
    "notify_ticket_update",
    "DAILY_STATS",
    "WEEKLY_STATS",
    "MONTHLY_STATS",
    "run_stats",
    "run_daily_stats",
    "run_weekly_stats",
    "run_monthly_stats",
]
