"""Dagster Jobs - Executable Workflows."""

from .archive_job import archive_job

__all__ = ["archive_job"]
