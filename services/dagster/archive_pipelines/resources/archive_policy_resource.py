"""Archive Policy Resource - run-level policy passed into the archive op."""

from typing import Optional

from dagster import ConfigurableResource
from pydantic import Field

from libs.archiving import DEFAULT_THROTTLE_MESSAGE
from libs.models import ArchivePolicySettings, SourceSettings

__all__ = ["ArchivePolicyResource"]


class ArchivePolicyResource(ConfigurableResource):
    """
    Retention, paging and throttling policy for archive runs.

    Carries the values of ArchivePolicySettings plus the source document
    layout (identity and timestamp field names) into the op, so the op
    never reads the environment itself.
    """

    retention_window_days: int = Field(..., ge=0, description="Minimum record age in days")
    batch_size: int = Field(20, ge=1, description="Records fetched per source round-trip")
    backoff_min_seconds: float = Field(1.5, ge=0, description="Lower bound of the throttling pause")
    backoff_max_seconds: float = Field(3.0, ge=0, description="Upper bound of the throttling pause")
    throttle_message: str = Field(DEFAULT_THROTTLE_MESSAGE, description="Message fragment identifying throttling")
    max_consecutive_throttles: Optional[int] = Field(None, ge=1, description="Pauses allowed without progress (None = unlimited)")
    id_field: str = Field("_id", description="Unique identity field")
    created_at_field: str = Field("_created_at", description="Creation timestamp field")

    @classmethod
    def from_settings(
        cls,
        policy: ArchivePolicySettings,
        source: SourceSettings,
    ) -> "ArchivePolicyResource":
        return cls(
            retention_window_days=policy.retention_window_days,
            batch_size=policy.batch_size,
            backoff_min_seconds=policy.backoff_min_seconds,
            backoff_max_seconds=policy.backoff_max_seconds,
            throttle_message=policy.throttle_message,
            max_consecutive_throttles=policy.max_consecutive_throttles,
            id_field=source.id_field,
            created_at_field=source.created_at_field,
        )
