# =============================================================================
# Record Archiver
# =============================================================================
# Writes one record to the destination object store as a single whole-object
# upload under a deterministic key.
# =============================================================================

import logging
from datetime import datetime
from typing import Any, Mapping, Protocol

from libs.errors import ArchiveWriteError

from .keys import archive_key
from .serialization import serialize_record

__all__ = ["BlobStore", "RecordArchiver"]

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Write side of the destination object store."""

    def put_text(self, key: str, text: str, content_type: str = "application/json") -> None:
        ...


class RecordArchiver:
    """
    Serialize and upload records.

    Re-archiving an unchanged record writes identical bytes to the same key,
    which is what makes replaying a record after a failed purge safe.

    Args:
        store: Destination exposing ``put_text``
        collection: Source collection name (key prefix)
        id_field: Identity field in source documents
        created_at_field: Creation timestamp field in source documents
        log: Logger (Dagster's context.log inside ops)
    """

    def __init__(
        self,
        store: BlobStore,
        collection: str,
        id_field: str = "_id",
        created_at_field: str = "_created_at",
        log=None,
    ):
        self._store = store
        self._collection = collection
        self._id_field = id_field
        self._created_at_field = created_at_field
        self._log = log or logger

    def key_for(self, record: Mapping[str, Any]) -> str:
        """
        Derive the archive key for a record.

        Raises:
            ArchiveWriteError: If identity or creation timestamp is missing or malformed
        """
        record_id = record.get(self._id_field)
        if record_id is None:
            raise ArchiveWriteError(f"Record has no '{self._id_field}' field")

        created_at = record.get(self._created_at_field)
        if not isinstance(created_at, datetime):
            raise ArchiveWriteError(
                f"Record {record_id} has no datetime '{self._created_at_field}' field "
                f"(got {type(created_at).__name__})"
            )

        return archive_key(self._collection, created_at, record_id)

    def archive(self, record: Mapping[str, Any]) -> str:
        """
        Write the record to the destination store.

        Returns:
            The key the record was written under

        Raises:
            ArchiveWriteError: If the write did not complete. The driver's
                message is included and the driver error is chained.
        """
        key = self.key_for(record)
        text = serialize_record(record)

        try:
            self._store.put_text(key, text)
        except Exception as exc:
            raise ArchiveWriteError(
                f"Failed to write archive object '{key}': {exc}", key=key
            ) from exc

        self._log.debug(f"Archived record to {key} ({len(text)} chars)")
        return key
