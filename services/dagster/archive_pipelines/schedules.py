"""Dagster Schedules - Fixed recurring triggers."""

from dagster import DefaultScheduleStatus, ScheduleDefinition

from .jobs import archive_job

ARCHIVE_CRON = "*/30 * * * *"

archive_schedule = ScheduleDefinition(
    name="archive_schedule",
    job=archive_job,
    cron_schedule=ARCHIVE_CRON,
    execution_timezone="UTC",
    default_status=DefaultScheduleStatus.RUNNING,
    description="Runs the archive job every 30 minutes",
)

__all__ = ["archive_schedule", "ARCHIVE_CRON"]
