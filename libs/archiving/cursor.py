# =============================================================================
# Batch Cursor
# =============================================================================
# Streams eligible records from the source store in bounded pages. Each page
# is an independent query (predicate AND id > last id, sorted by id, limited
# to batch_size), so no server-side cursor can time out mid-run and the
# stream can be re-opened at a known position after a throttling pause.
# =============================================================================

import logging
from typing import Any, Dict, Iterator, List, Optional, Protocol

from libs.errors import StoreOperationError
from libs.models import ExportFilter

__all__ = ["SourceStore", "BatchCursor", "BatchStream"]

logger = logging.getLogger(__name__)


class SourceStore(Protocol):
    """Query side of the document store used by the cursor."""

    def find_page(
        self,
        query: Dict[str, Any],
        sort_field: str,
        limit: int,
    ) -> List[Dict[str, Any]]:
        ...


class BatchStream:
    """
    Lazy, finite, single-use sequence of records.

    The next page is fetched only after the current one has been consumed.
    Fetch errors are raised as StoreOperationError chained to the driver
    error; the stream does not retry.

    Attributes:
        fetches: Number of page queries issued so far
        position: Identity of the last record yielded (None before the first)
    """

    def __init__(
        self,
        store: SourceStore,
        predicate: ExportFilter,
        batch_size: int,
        id_field: str,
        after: Optional[Any] = None,
        log=None,
    ):
        self._store = store
        self._predicate = predicate
        self._batch_size = batch_size
        self._id_field = id_field
        self._log = log or logger
        self._iterator = self._iterate(after)
        self.fetches = 0
        self.position = after

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return self

    def __next__(self) -> Dict[str, Any]:
        return next(self._iterator)

    def _page_query(self, after: Optional[Any]) -> Dict[str, Any]:
        query = self._predicate.to_query()
        if after is not None:
            query[self._id_field] = {"$gt": after}
        return query

    def _iterate(self, after: Optional[Any]) -> Iterator[Dict[str, Any]]:
        while True:
            try:
                batch = self._store.find_page(
                    self._page_query(after),
                    sort_field=self._id_field,
                    limit=self._batch_size,
                )
            except Exception as exc:
                raise StoreOperationError(
                    f"Failed to fetch batch {self.fetches + 1} after {after!r}: {exc}"
                ) from exc
            self.fetches += 1
            self._log.debug(f"Fetched batch {self.fetches} with {len(batch)} records")

            for record in batch:
                self.position = record[self._id_field]
                yield record

            if len(batch) < self._batch_size:
                return
            after = batch[-1][self._id_field]


class BatchCursor:
    """
    Opens record streams against a source store.

    Args:
        store: Source store exposing ``find_page``
        id_field: Unique identity field, also the paging sort key
    """

    def __init__(self, store: SourceStore, id_field: str = "_id", log=None):
        self._store = store
        self._id_field = id_field
        self._log = log or logger

    def open(
        self,
        predicate: ExportFilter,
        batch_size: int = 20,
        after: Optional[Any] = None,
    ) -> BatchStream:
        """
        Start streaming records matching ``predicate``.

        Args:
            predicate: Eligibility filter for this run
            batch_size: Maximum records per page
            after: Resume strictly after this identity (None starts at the beginning)
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        return BatchStream(
            self._store,
            predicate,
            batch_size,
            self._id_field,
            after=after,
            log=self._log,
        )
