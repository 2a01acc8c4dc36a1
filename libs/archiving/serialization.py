"""
Lossless record serialization.

Records are written as MongoDB canonical Extended JSON so every BSON type
(dates, ObjectId, Int64, Decimal128, binary...) survives a round trip through
the archive. Field order is preserved, so identical input gives
byte-identical output.
"""

from typing import Any, Mapping

from bson import json_util
from bson.json_util import CANONICAL_JSON_OPTIONS

__all__ = ["serialize_record", "parse_record"]

# Dates come back naive UTC, as pymongo returns them from the source store.
_PARSE_OPTIONS = CANONICAL_JSON_OPTIONS.with_options(tz_aware=False)


def serialize_record(record: Mapping[str, Any]) -> str:
    """Serialize a source document to canonical Extended JSON text."""
    return json_util.dumps(record, json_options=CANONICAL_JSON_OPTIONS)


def parse_record(text: str | bytes) -> dict:
    """Parse archived text back into an equivalent document."""
    return json_util.loads(text, json_options=_PARSE_OPTIONS)
