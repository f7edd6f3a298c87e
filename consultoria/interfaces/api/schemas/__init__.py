from .notification import (
    AdminSummaryRead,
    NotificationCreate,
    NotificationMarkReadRequest,
    NotificationPageRead,
    NotificationRead,
    NotificationStatsRead,
    OperationResult,
)

__all__ = [
    "AdminSummaryRead",
    "NotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationPageRead",
    "NotificationRead",
    "NotificationStatsRead",
    "OperationResult",
]
