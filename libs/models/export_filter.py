# =============================================================================
# Export Filter Model
# =============================================================================
# Immutable eligibility predicate: `created_at < cutoff`, evaluated against
# the source store with BSON date semantics.
# =============================================================================

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["ExportFilter", "to_store_datetime"]


def to_store_datetime(value: datetime) -> datetime:
    """
    Normalize a datetime to the form pymongo hands back for BSON dates.

    BSON dates are UTC with millisecond precision and pymongo returns them as
    naive datetimes, so aware values are converted to UTC and stripped, and
    microseconds are truncated to whole milliseconds.

    Examples:
        >>> to_store_datetime(datetime(2024, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc))
        datetime.datetime(2024, 1, 1, 12, 0, 0, 123000)
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


class ExportFilter(BaseModel):
    """
    Predicate selecting records old enough to be archived.

    Built once per run (see libs.archiving.filters.build_filter) so the
    eligibility boundary stays fixed while the run progresses.

    Attributes:
        field: Name of the creation timestamp field in source documents
        cutoff: Records strictly older than this are eligible
    """

    model_config = ConfigDict(frozen=True)

    field: str = Field("_created_at", min_length=1, description="Creation timestamp field")
    cutoff: datetime = Field(..., description="Exclusive upper bound on the creation timestamp")

    @field_validator("cutoff")
    @classmethod
    def normalize_cutoff(cls, v: datetime) -> datetime:
        return to_store_datetime(v)

    def to_query(self) -> Dict[str, Any]:
        """Return the MongoDB query document for this predicate."""
        return {self.field: {"$lt": self.cutoff}}

    def matches(self, created_at: datetime) -> bool:
        """
        Evaluate the predicate locally.

        Uses the same strict less-than the store applies, so a record created
        exactly at the cutoff is retained.
        """
        return to_store_datetime(created_at) < self.cutoff
