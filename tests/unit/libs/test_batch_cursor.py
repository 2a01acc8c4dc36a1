"""
Unit tests for BatchCursor.

Uses the mongomock-backed source store from conftest.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pymongo.errors import AutoReconnect

from libs.archiving import BatchCursor, StoreOperationError, build_filter


@pytest.fixture
def predicate(now):
    return build_filter(timedelta(days=180), now)


@pytest.fixture
def seed(source_collection, make_record):
    def _seed(count, days=200, prefix="rec"):
        docs = [make_record(f"{prefix}-{i:03d}", days) for i in range(count)]
        if docs:
            source_collection.insert_many(docs)
        return [d["_id"] for d in docs]

    return _seed


def test_streams_all_matches_in_id_order(source, predicate, seed):
    ids = seed(45)

    stream = BatchCursor(source).open(predicate, batch_size=20)
    visited = [r["_id"] for r in stream]

    assert visited == ids
    assert stream.fetches == 3
    assert len(source.fetch_calls) == 3


def test_exact_multiple_needs_trailing_empty_fetch(source, predicate, seed):
    seed(40)

    stream = BatchCursor(source).open(predicate, batch_size=20)
    assert len(list(stream)) == 40
    assert stream.fetches == 3


def test_empty_result_single_fetch(source, predicate):
    stream = BatchCursor(source).open(predicate, batch_size=20)
    assert list(stream) == []
    assert stream.fetches == 1


def test_fetches_lazily(source, predicate, seed):
    """The next page is requested only after the current one is consumed."""
    seed(45)
    stream = BatchCursor(source).open(predicate, batch_size=20)

    assert source.fetch_calls == []
    for _ in range(20):
        next(stream)
    assert stream.fetches == 1

    next(stream)
    assert stream.fetches == 2


def test_excludes_young_records(source, predicate, seed):
    old = seed(3, days=200, prefix="old")
    seed(3, days=10, prefix="young")

    assert [r["_id"] for r in BatchCursor(source).open(predicate)] == old


def test_boundary_record_retained(source, source_collection, predicate, now):
    exact = (now - timedelta(days=180)).replace(tzinfo=None)
    source_collection.insert_many(
        [
            {"_id": "at-boundary", "_created_at": exact},
            {"_id": "just-older", "_created_at": exact - timedelta(milliseconds=1)},
        ]
    )

    assert [r["_id"] for r in BatchCursor(source).open(predicate)] == ["just-older"]


def test_resume_after_position(source, predicate, seed):
    ids = seed(10)

    stream = BatchCursor(source).open(predicate, batch_size=4, after=ids[5])

    assert [r["_id"] for r in stream] == ids[6:]
    assert source.fetch_calls[0]["_id"] == {"$gt": ids[5]}


def test_position_tracks_last_yielded(source, predicate, seed):
    ids = seed(3)
    stream = BatchCursor(source).open(predicate)
    assert stream.position is None

    next(stream)
    next(stream)
    assert stream.position == ids[1]


def test_records_purged_during_iteration_do_not_break_paging(source, source_collection, predicate, seed):
    ids = seed(45)
    visited = []

    for record in BatchCursor(source).open(predicate, batch_size=20):
        visited.append(record["_id"])
        source_collection.delete_one({"_id": record["_id"]})

    assert visited == ids
    assert source_collection.count_documents({}) == 0


def test_fetch_error_wrapped_without_retry(source, predicate, seed):
    seed(5)
    driver_error = AutoReconnect("connection reset")
    source.fetch_failures = [driver_error]

    with pytest.raises(StoreOperationError, match="connection reset") as exc_info:
        list(BatchCursor(source).open(predicate))

    assert exc_info.value.__cause__ is driver_error
    assert len(source.fetch_calls) == 1


def test_not_restartable(source, predicate, seed):
    seed(2)
    stream = BatchCursor(source).open(predicate)
    assert len(list(stream)) == 2
    assert list(stream) == []


def test_rejects_non_positive_batch_size(source, predicate):
    with pytest.raises(ValueError, match="batch_size"):
        BatchCursor(source).open(predicate, batch_size=0)
