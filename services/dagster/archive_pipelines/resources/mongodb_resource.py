"""MongoDB Resource - Source document store operations."""

from __future__ import annotations

from functools import cached_property
from typing import Any, Dict, List

from dagster import ConfigurableResource
from pydantic import Field
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

__all__ = ["MongoDBResource"]


class MongoDBResource(ConfigurableResource):
    """
    Dagster resource for the live document store.

    Exposes the three operations the archive run needs: a bounded, sorted
    page query, a single-document delete by identity, and the raw collection
    handle. Works against MongoDB and MongoDB-compatible services such as
    Cosmos DB for MongoDB.
    """

    connection_string: str = Field(..., description="MongoDB connection URI")
    database: str = Field(..., description="MongoDB database name")
    collection: str = Field(..., description="Collection holding live records")

    @cached_property
    def _client(self) -> MongoClient:
        return MongoClient(self.connection_string)

    def _get_db(self) -> Database:
        return self._client[self.database]

    def get_collection(self) -> Collection:
        return self._get_db()[self.collection]

    def find_page(
        self,
        query: Dict[str, Any],
        sort_field: str,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """
        Fetch one page of matching documents.

        The page is materialized with a single round-trip (batch_size equals
        the limit), so callers control memory use through ``limit``.

        Args:
            query: MongoDB filter document
            sort_field: Field to sort ascending on (the paging key)
            limit: Maximum number of documents to return
        """
        cursor = (
            self.get_collection()
            .find(query, batch_size=limit)
            .sort([(sort_field, ASCENDING)])
            .limit(limit)
        )
        return list(cursor)

    def delete_by_id(self, id_field: str, record_id: Any) -> int:
        """
        Delete at most one document whose ``id_field`` equals ``record_id``.

        Returns:
            Number of deleted documents (0 if it was already gone)
        """
        result = self.get_collection().delete_one({id_field: record_id})
        return result.deleted_count
