"""Dagster Definitions - Repository Configuration.

Defines the archive job, its triggers and resources. Settings are loaded
from the environment once, when this module is imported; a missing or
invalid value raises ConfigError before any run can start.
"""

from dagster import Definitions

from libs.models import ArchiveSettings, load_archive_settings

from .jobs import archive_job
from .resources import ArchivePolicyResource, MinIOResource, MongoDBResource
from .schedules import archive_schedule
from .sensors import archive_on_startup_sensor


def build_definitions(settings: ArchiveSettings) -> Definitions:
    """
    Wire the archive job to resources built from ``settings``.

    Args:
        settings: Archive configuration loaded at process start

    Returns:
        Dagster Definitions for the code location
    """
    return Definitions(
        jobs=[archive_job],
        resources={
            "mongodb": MongoDBResource(
                connection_string=settings.source.connection_string,
                database=settings.source.database,
                collection=settings.source.collection,
            ),
            "minio": MinIOResource.from_settings(settings.destination),
            "archive_policy": ArchivePolicyResource.from_settings(
                settings.policy, settings.source
            ),
        },
        schedules=[archive_schedule],
        sensors=[archive_on_startup_sensor],
    )


defs = build_definitions(load_archive_settings())
