"""Periodic system statistics published to administrators.

Each run computes its window, collects counts from the user, login, budget
and client stores, renders a fixed summary and creates exactly one
notification broadcast to the admin role. A run that cannot collect its
counts, or that takes longer than ``stats_run_timeout_seconds``, logs the
problem and creates nothing. Scheduled firings and manual triggers share the
same functions.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from consultoria.config import get_settings
from consultoria.domain.entities import (
    PRIORITY_HIGH,
    PRIORITY_MEDIUM,
    USER_STATUS_ACTIVE,
    Notification,
    RoleTarget,
    StatsSummary,
    StatsWindow,
)
from consultoria.domain.exceptions import AggregationFailure
from consultoria.infrastructure.database import SessionLocal
from consultoria.infrastructure.repositories import (
    BudgetRepository,
    ClientRepository,
    LoginHistoryRepository,
    UserRepository,
)
from consultoria.utils import (
    end_of_day,
    format_display_date,
    now_in_app_timezone,
    start_of_day,
)

from .router import NotificationRouter, build_notification_router

logger = logging.getLogger(__name__)

_MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def daily_window(now: datetime) -> StatsWindow:
    """Today from 00:00:00 to 23:59:59."""

    return StatsWindow(start=start_of_day(now), end=end_of_day(now))


def weekly_window(now: datetime) -> StatsWindow:
    """Seven days ago at 00:00:00 up to the end of today."""

    return StatsWindow(start=start_of_day(now - timedelta(days=7)), end=end_of_day(now))


def monthly_window(now: datetime) -> StatsWindow:
    """First day of the previous calendar month up to the end of today."""

    first_of_month = start_of_day(now).replace(day=1)
    previous_month_start = (first_of_month - timedelta(days=1)).replace(day=1)
    return StatsWindow(start=previous_month_start, end=end_of_day(now))


def _base_counts(session: Session, window: StatsWindow) -> tuple[int, int, int]:
    new_users = UserRepository(session).count_registered_between(window.start, window.end)
    unique_logins = LoginHistoryRepository(session).count_unique_users_between(
        window.start, window.end
    )
    new_budgets = BudgetRepository(session).count_created_between(window.start, window.end)
    return new_users, unique_logins, new_budgets


def collect_daily_stats(session: Session, window: StatsWindow) -> StatsSummary:
    new_users, unique_logins, new_budgets = _base_counts(session, window)
    total_active = UserRepository(session).count_by_status(USER_STATUS_ACTIVE)
    return StatsSummary(
        window=window,
        new_users=new_users,
        unique_logins=unique_logins,
        new_budgets=new_budgets,
        extra={"total_active_users": total_active},
    )


def collect_weekly_stats(session: Session, window: StatsWindow) -> StatsSummary:
    new_users, unique_logins, new_budgets = _base_counts(session, window)
    active_clients = ClientRepository(session).count_active_in_period(
        window.start.date(), window.end.date()
    )
    return StatsSummary(
        window=window,
        new_users=new_users,
        unique_logins=unique_logins,
        new_budgets=new_budgets,
        extra={"active_clients": active_clients},
    )


def collect_monthly_stats(session: Session, window: StatsWindow) -> StatsSummary:
    new_users, unique_logins, new_budgets = _base_counts(session, window)
    return StatsSummary(
        window=window,
        new_users=new_users,
        unique_logins=unique_logins,
        new_budgets=new_budgets,
        extra={
            "total_clients": ClientRepository(session).count(),
            "total_users": UserRepository(session).count(),
        },
    )


def format_daily_stats(summary: StatsSummary) -> str:
    return (
        f"Resumen de actividad del día {format_display_date(summary.window.start)}:\n\n"
        f"Nuevos usuarios: {summary.new_users}\n"
        f"Logins únicos: {summary.unique_logins}\n"
        f"Nuevos presupuestos: {summary.new_budgets}\n"
        f"Total usuarios activos: {summary.extra['total_active_users']}\n\n"
        "Mantente al día con la actividad de tu plataforma."
    )


def format_weekly_stats(summary: StatsSummary) -> str:
    return (
        f"Reporte semanal ({format_display_date(summary.window.start)} - "
        f"{format_display_date(summary.window.end)}):\n\n"
        f"Nuevos usuarios: {summary.new_users}\n"
        f"Logins únicos: {summary.unique_logins}\n"
        f"Nuevos presupuestos: {summary.new_budgets}\n"
        f"Clientes activos: {summary.extra['active_clients']}\n\n"
        "Esta semana ha sido productiva. ¡Sigue así!"
    )


def format_monthly_stats(summary: StatsSummary) -> str:
    start = summary.window.start
    month_label = f"{_MONTH_NAMES[start.month - 1]} {start.year}"
    return (
        f"Reporte mensual de {month_label} "
        f"({format_display_date(start)} - {format_display_date(summary.window.end)}):\n\n"
        f"Nuevos usuarios: {summary.new_users}\n"
        f"Logins únicos: {summary.unique_logins}\n"
        f"Nuevos presupuestos: {summary.new_budgets}\n"
        f"Total clientes: {summary.extra['total_clients']}\n"
        f"Total usuarios: {summary.extra['total_users']}\n\n"
        "Excelente progreso este mes. ¡Continúa creciendo!"
    )


@dataclass(frozen=True)
class StatsJob:
    """Everything a statistics run needs besides the clock and the session."""

    name: str
    event_type: str
    title: str
    priority: str
    window: Callable[[datetime], StatsWindow]
    collect: Callable[[Session, StatsWindow], StatsSummary]
    render: Callable[[StatsSummary], str]


DAILY_STATS = StatsJob(
    name="daily",
    event_type="DAILY_STATS",
    title="Estadísticas Diarias del Sistema",
    priority=PRIORITY_MEDIUM,
    window=daily_window,
    collect=collect_daily_stats,
    render=format_daily_stats,
)
WEEKLY_STATS = StatsJob(
    name="weekly",
    event_type="WEEKLY_STATS",
    title="Reporte Semanal del Sistema",
    priority=PRIORITY_MEDIUM,
    window=weekly_window,
    collect=collect_weekly_stats,
    render=format_weekly_stats,
)
MONTHLY_STATS = StatsJob(
    name="monthly",
    event_type="MONTHLY_STATS",
    title="Reporte Mensual del Sistema",
    priority=PRIORITY_HIGH,
    window=monthly_window,
    collect=collect_monthly_stats,
    render=format_monthly_stats,
)


def run_stats(
    job: StatsJob,
    *,
    session_factory: Callable[[], Session] = SessionLocal,
    router_factory: Callable[[Session], NotificationRouter] = build_notification_router,
    now: datetime | None = None,
) -> Notification | None:
    """Execute ``job`` once and return the published notification, if any."""

    settings = get_settings()
    started = time.monotonic()
    reference = now or now_in_app_timezone()
    logger.info("Generando estadísticas %s...", job.name)

    session = session_factory()
    try:
        window = job.window(reference)
        try:
            summary = job.collect(session, window)
        except Exception as exc:
            raise AggregationFailure(f"{job.name} stats collection failed: {exc}") from exc

        elapsed = time.monotonic() - started
        if elapsed > settings.stats_run_timeout_seconds:
            raise AggregationFailure(
                f"{job.name} stats collection took {elapsed:.1f}s, "
                f"over the {settings.stats_run_timeout_seconds:.0f}s limit"
            )

        message = job.render(summary)
        notification = router_factory(session).create(
            event_type=job.event_type,
            title=job.title,
            message=message,
            priority=job.priority,
            target=RoleTarget(settings.admin_role),
        )
    except AggregationFailure as exc:
        logger.error("Estadísticas %s abortadas: %s", job.name, exc)
        session.rollback()
        return None
    except Exception:
        logger.exception("Error enviando estadísticas %s", job.name)
        session.rollback()
        return None
    finally:
        session.close()

    logger.info("Estadísticas %s enviadas a administradores (notificación %s)", job.name, notification.id)
    return notification


def run_daily_stats(**kwargs) -> Notification | None:
    return run_stats(DAILY_STATS, **kwargs)


def run_weekly_stats(**kwargs) -> Notification | None:
    return run_stats(WEEKLY_STATS, **kwargs)


def run_monthly_stats(**kwargs) -> Notification | None:
    return run_stats(MONTHLY_STATS, **kwargs)


__all__ = [
    "DAILY_STATS",
    "WEEKLY_STATS",
    "MONTHLY_STATS",
    "StatsJob",
    "collect_daily_stats",
    "collect_weekly_stats",
    "collect_monthly_stats",
    "daily_window",
    "weekly_window",
    "monthly_window",
    "format_daily_stats",
    "format_weekly_stats",
    "format_monthly_stats",
    "run_stats",
    "run_daily_stats",
    "run_weekly_stats",
    "run_monthly_stats",
]
