"""Eligibility filter construction."""

from datetime import datetime, timedelta

from libs.models import ExportFilter

__all__ = ["build_filter"]


def build_filter(
    retention_window: timedelta,
    now: datetime,
    field: str = "_created_at",
) -> ExportFilter:
    """
    Build the predicate selecting records older than the retention window.

    Pure function: the caller reads the clock once per run and passes it in,
    so the boundary is fixed for the whole run.

    Args:
        retention_window: Minimum age a record must reach (non-negative)
        now: Clock reading taken at run start
        field: Creation timestamp field in source documents

    Returns:
        ExportFilter for ``field < now - retention_window``

    Raises:
        ValueError: If retention_window is negative

    Examples:
        >>> build_filter(timedelta(days=1), datetime(2024, 1, 2)).to_query()
        {'_created_at': {'$lt': datetime.datetime(2024, 1, 1, 0, 0)}}
    """
    if retention_window < timedelta(0):
        raise ValueError(f"retention_window must be non-negative, got {retention_window}")
    return ExportFilter(field=field, cutoff=now - retention_window)
