"""Dagster Ops - Reusable Computation Units."""

from .archive_op import archive_expired_records

__all__ = [
    "archive_expired_records",
]
