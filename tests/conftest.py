"""
Shared pytest fixtures for archive tests.

Provides an in-memory source store (mongomock behind MongoDBResource), an
in-memory object store, and helpers for building aged records.
"""

from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from services.dagster.archive_pipelines.resources import (
    ArchivePolicyResource,
    MongoDBResource,
)


# =============================================================================
# Clock Fixtures
# =============================================================================

# Naive UTC, millisecond precision: the form pymongo returns for BSON dates.
FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
FIXED_NOW_NAIVE = FIXED_NOW.replace(tzinfo=None)


@pytest.fixture
def now():
    """Fixed run-start clock reading (aware UTC)."""
    return FIXED_NOW


@pytest.fixture
def clock(now):
    """Clock callable returning the fixed run-start time."""
    return lambda: now


def days_ago(days: float) -> datetime:
    """Naive UTC timestamp `days` before FIXED_NOW."""
    return FIXED_NOW_NAIVE - timedelta(days=days)


# =============================================================================
# Store Fakes
# =============================================================================


class FakeBlobStore:
    """
    In-memory object store with optional failure injection.

    `failures` maps an object key to a list of exceptions raised on
    successive uploads of that key; once the list is empty uploads succeed.
    """

    def __init__(self, events=None):
        self.objects = {}
        self.puts = []
        self.failures = {}
        self.events = events if events is not None else []
        self.bucket = "archive"

    def put_text(self, key, text, content_type="application/json"):
        pending = self.failures.get(key)
        if pending:
            raise pending.pop(0)
        self.objects[key] = text
        self.puts.append((key, text))
        self.events.append(("archive", key))


class SpySource:
    """
    Wraps a source store, counting fetches and injecting failures.

    `fetch_failures` / `delete_failures` are lists of exceptions raised (in
    order) by the next calls; delete failures can be keyed by record id.
    """

    def __init__(self, inner, events=None):
        self.inner = inner
        self.collection = inner.collection
        self.fetch_calls = []
        self.fetch_failures = []
        self.delete_failures = {}
        self.events = events if events is not None else []

    def find_page(self, query, sort_field, limit):
        self.fetch_calls.append(query)
        if self.fetch_failures:
            raise self.fetch_failures.pop(0)
        return self.inner.find_page(query, sort_field=sort_field, limit=limit)

    def delete_by_id(self, id_field, record_id):
        pending = self.delete_failures.get(record_id)
        if pending:
            raise pending.pop(0)
        self.events.append(("purge", record_id))
        return self.inner.delete_by_id(id_field, record_id)


# =============================================================================
# Resource Fixtures
# =============================================================================


@pytest.fixture
def mongomock_client():
    """In-memory MongoDB client for tests."""
    return mongomock.MongoClient()


@pytest.fixture
def mongo_resource(monkeypatch, mongomock_client):
    """MongoDBResource configured to use the mongomock client."""
    monkeypatch.setattr(
        "services.dagster.archive_pipelines.resources.mongodb_resource.MongoClient",
        lambda *args, **kwargs: mongomock_client,
    )
    return MongoDBResource(
        connection_string="mongodb://localhost:27017",
        database="telemetry",
        collection="events",
    )


@pytest.fixture
def source_collection(mongo_resource):
    """Raw mongomock collection behind mongo_resource."""
    return mongo_resource.get_collection()


@pytest.fixture
def events():
    """Shared ordered log of archive/purge calls."""
    return []


@pytest.fixture
def blob_store(events):
    return FakeBlobStore(events)


@pytest.fixture
def source(mongo_resource, events):
    return SpySource(mongo_resource, events)


@pytest.fixture
def policy():
    return ArchivePolicyResource(
        retention_window_days=180,
        batch_size=20,
        backoff_min_seconds=1.5,
        backoff_max_seconds=3.0,
    )


@pytest.fixture
def make_record():
    """Factory for source documents `days` old."""

    def _make(record_id, days, **extra):
        return {"_id": record_id, "_created_at": days_ago(days), **extra}

    return _make
