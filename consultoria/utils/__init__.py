"""Utility helpers for reusable functionality."""

from .datetime import (
    end_of_day,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    format_display_date,
    format_display_datetime,
    get_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    start_of_day,
)

__all__ = [
    "end_of_day",
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "format_display_date",
    "format_display_datetime",
    "get_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "start_of_day",
]
