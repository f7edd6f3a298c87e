"""Tests for the statistics scheduler wiring."""

from __future__ import annotations

from consultoria.application.use_cases.notifications import (
    run_daily_stats,
    run_monthly_stats,
    run_weekly_stats,
)
from consultoria.config import Settings
from consultoria.interfaces import scheduler as stats_scheduler


def _settings(**overrides) -> Settings:
    values = {"database_url": "sqlite://"}
    values.update(overrides)
    return Settings(**values)


def _fields(trigger) -> dict[str, str]:
    return {field.name: str(field) for field in trigger.fields}


def test_build_scheduler_registers_the_three_jobs():
    scheduler = stats_scheduler.build_scheduler(_settings())

    jobs = {job.id: job for job in scheduler.get_jobs()}

    assert set(jobs) == {"daily_stats", "weekly_stats", "monthly_stats"}
    assert jobs["daily_stats"].func is run_daily_stats
    assert jobs["weekly_stats"].func is run_weekly_stats
    assert jobs["monthly_stats"].func is run_monthly_stats
    assert scheduler.running is False


def test_default_triggers_follow_the_reporting_calendar():
    scheduler = stats_scheduler.build_scheduler(_settings())
    triggers = {job.id: _fields(job.trigger) for job in scheduler.get_jobs()}

    assert (triggers["daily_stats"]["hour"], triggers["daily_stats"]["minute"]) == ("8", "0")
    assert triggers["weekly_stats"]["day_of_week"] == "mon"
    assert triggers["weekly_stats"]["hour"] == "9"
    assert triggers["monthly_stats"]["day"] == "1"
    assert triggers["monthly_stats"]["hour"] == "10"


def test_triggers_can_be_configured():
    scheduler = stats_scheduler.build_scheduler(
        _settings(daily_stats_hour=6, weekly_stats_day="Friday", monthly_stats_day=15)
    )
    triggers = {job.id: _fields(job.trigger) for job in scheduler.get_jobs()}

    assert triggers["daily_stats"]["hour"] == "6"
    assert triggers["weekly_stats"]["day_of_week"] == "fri"
    assert triggers["monthly_stats"]["day"] == "15"


def test_runs_do_not_overlap_and_missed_firings_coalesce():
    scheduler = stats_scheduler.build_scheduler(_settings())

    for job in scheduler.get_jobs():
        assert job.max_instances == 1
        assert job.coalesce is True


def test_start_scheduler_respects_disabled_setting():
    assert stats_scheduler.start_scheduler(_settings(scheduler_enabled=False)) is None
    stats_scheduler.shutdown_scheduler()
