"""
Export-and-purge core.

Pure-Python building blocks with no Dagster dependency:
- build_filter: eligibility predicate for aging records
- BatchCursor: bounded, lazily fetched record stream
- RecordArchiver / RecordPurger: archive-then-delete steps
- ThrottleAwareRunner: per-record orchestration with throttling backoff
"""

from libs.errors import (
    ArchiveWriteError,
    ConfigError,
    StoreOperationError,
    TransientRateLimitError,
)

from .archiver import BlobStore, RecordArchiver
from .backoff import RandomizedBackoff
from .classifier import (
    DEFAULT_THROTTLE_MESSAGE,
    AnyClassifier,
    FailureClassifier,
    StatusCodeClassifier,
    ThrottleMessageClassifier,
    default_classifier,
)
from .cursor import BatchCursor, BatchStream, SourceStore
from .filters import build_filter
from .keys import ARCHIVE_TIMESTAMP_FORMAT, archive_key
from .purger import DeleteStore, RecordPurger
from .runner import ThrottleAwareRunner, utc_now
from .serialization import parse_record, serialize_record

__all__ = [
    # Errors
    "ArchiveWriteError",
    "ConfigError",
    "StoreOperationError",
    "TransientRateLimitError",
    # Filter and keys
    "build_filter",
    "archive_key",
    "ARCHIVE_TIMESTAMP_FORMAT",
    # Serialization
    "serialize_record",
    "parse_record",
    # Stores
    "SourceStore",
    "BlobStore",
    "DeleteStore",
    # Components
    "BatchCursor",
    "BatchStream",
    "RecordArchiver",
    "RecordPurger",
    "RandomizedBackoff",
    # Classification
    "FailureClassifier",
    "ThrottleMessageClassifier",
    "StatusCodeClassifier",
    "AnyClassifier",
    "default_classifier",
    "DEFAULT_THROTTLE_MESSAGE",
    # Runner
    "ThrottleAwareRunner",
    "utc_now",
]
