"""Background scheduler firing the periodic statistics runs."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from consultoria.application.use_cases.notifications import (
    run_daily_stats,
    run_monthly_stats,
    run_weekly_stats,
)
from consultoria.config import Settings, get_settings
from consultoria.utils import get_app_timezone

logger = logging.getLogger(__name__)

DAILY_JOB_ID = "daily_stats"
WEEKLY_JOB_ID = "weekly_stats"
MONTHLY_JOB_ID = "monthly_stats"

# One firing produces at most one notification: no overlapping runs and
# missed firings collapse into a single run.
_JOB_DEFAULTS = {"max_instances": 1, "coalesce": True, "misfire_grace_time": 3600}

_scheduler: BackgroundScheduler | None = None


def build_scheduler(settings: Settings | None = None) -> BackgroundScheduler:
    """Return a scheduler with the daily, weekly and monthly jobs registered."""

    settings = settings or get_settings()
    timezone = get_app_timezone()
    scheduler = BackgroundScheduler(timezone=timezone, job_defaults=_JOB_DEFAULTS)

    scheduler.add_job(
        run_daily_stats,
        trigger=CronTrigger(hour=settings.daily_stats_hour, minute=0, timezone=timezone),
        id=DAILY_JOB_ID,
        name="Estadísticas diarias",
        replace_existing=True,
    )
    scheduler.add_job(
        run_weekly_stats,
        trigger=CronTrigger(
            day_of_week=settings.weekly_stats_day,
            hour=settings.weekly_stats_hour,
            minute=0,
            timezone=timezone,
        ),
        id=WEEKLY_JOB_ID,
        name="Estadísticas semanales",
        replace_existing=True,
    )
    scheduler.add_job(
        run_monthly_stats,
        trigger=CronTrigger(
            day=settings.monthly_stats_day,
            hour=settings.monthly_stats_hour,
            minute=0,
            timezone=timezone,
        ),
        id=MONTHLY_JOB_ID,
        name="Estadísticas mensuales",
        replace_existing=True,
    )
    return scheduler


def start_scheduler(settings: Settings | None = None) -> BackgroundScheduler | None:
    """Start the process-wide scheduler once, if enabled in the settings."""

    global _scheduler

    settings = settings or get_settings()
    if not settings.scheduler_enabled:
        logger.info("Stats scheduler disabled via settings (SCHEDULER_ENABLED=False)")
        return None
    if _scheduler is not None:
        logger.info("Stats scheduler already running, skipping initialization")
        return _scheduler

    _scheduler = build_scheduler(settings)
    _scheduler.start()
    for job in _scheduler.get_jobs():
        logger.info("Scheduled %s (next run %s)", job.id, job.next_run_time)
    return _scheduler


def shutdown_scheduler() -> None:
    global _scheduler

    if _scheduler is None:
        return
    _scheduler.shutdown(wait=False)
    _scheduler = None
    logger.info("Stats scheduler stopped")


__all__ = [
    "DAILY_JOB_ID",
    "WEEKLY_JOB_ID",
    "MONTHLY_JOB_ID",
    "build_scheduler",
    "start_scheduler",
    "shutdown_scheduler",
]
