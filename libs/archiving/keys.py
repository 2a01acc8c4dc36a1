# =============================================================================
# Archive Key Derivation
# =============================================================================
# Destination object keys are derived from the record alone so that a retry
# after a partial failure overwrites the same object instead of duplicating
# it.
# =============================================================================

from datetime import datetime, timezone
from typing import Any

__all__ = ["ARCHIVE_TIMESTAMP_FORMAT", "archive_key"]

ARCHIVE_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def archive_key(collection: str, created_at: datetime, record_id: Any) -> str:
    """
    Build the destination key for a record.

    Format: ``{collection}/{created_at:yyyyMMddHHmmss}_{record_id}.json``.
    Aware timestamps are converted to UTC first; naive ones are taken as UTC,
    matching what pymongo returns for BSON dates.

    Args:
        collection: Source collection name, used as the key prefix
        created_at: Record creation timestamp
        record_id: Record identity (stringified)

    Raises:
        ValueError: If collection or record_id is empty

    Examples:
        >>> archive_key("orders", datetime(2024, 3, 5, 7, 8, 9), "a1")
        'orders/20240305070809_a1.json'
    """
    if not collection:
        raise ValueError("collection must not be empty")
    record_id = str(record_id)
    if not record_id:
        raise ValueError("record_id must not be empty")
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc)
    return f"{collection}/{created_at.strftime(ARCHIVE_TIMESTAMP_FORMAT)}_{record_id}.json"
