"""Dagster Sensors - Event-Driven Job Triggers."""

from .startup_sensor import archive_on_startup_sensor

__all__ = [
    "archive_on_startup_sensor",
]
