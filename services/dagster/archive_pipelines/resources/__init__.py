"""Dagster Resources - External Service Connections."""

from .archive_policy_resource import ArchivePolicyResource
from .minio_resource import MinIOResource
from .mongodb_resource import MongoDBResource

__all__ = [
    "ArchivePolicyResource",
    "MinIOResource",
    "MongoDBResource",
]
