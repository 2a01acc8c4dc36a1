"""Record deletion from the source store."""

import logging
from typing import Any, Protocol

from libs.errors import StoreOperationError

__all__ = ["DeleteStore", "RecordPurger"]

logger = logging.getLogger(__name__)


class DeleteStore(Protocol):
    """Delete side of the document store."""

    def delete_by_id(self, id_field: str, record_id: Any) -> int:
        ...


class RecordPurger:
    """
    Delete archived records by identity.

    Only the runner calls this, and only after the same record was archived.
    A delete count of 0 means another process already removed the record and
    is not an error.
    """

    def __init__(self, store: DeleteStore, id_field: str = "_id", log=None):
        self._store = store
        self._id_field = id_field
        self._log = log or logger

    def purge(self, record_id: Any) -> int:
        """
        Delete at most one record matching ``record_id``.

        Returns:
            Number of documents deleted (0 or 1)

        Raises:
            StoreOperationError: If the delete call fails (driver error chained)
        """
        try:
            deleted = self._store.delete_by_id(self._id_field, record_id)
        except Exception as exc:
            raise StoreOperationError(f"Failed to delete record {record_id}: {exc}") from exc

        if deleted == 0:
            self._log.info(f"Record {record_id} already absent from source")
        return deleted
