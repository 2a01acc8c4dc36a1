# =============================================================================
# Run Models
# =============================================================================
# Per-record outcomes and per-run summary for the archive runner. Nothing
# here is persisted between runs; each run re-derives its working set from
# the export filter.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


__all__ = ["RunState", "RecordOutcome", "RunSummary"]


class RunState(str, Enum):
    """States of the archive runner."""

    IDLE = "idle"
    STREAMING = "streaming"
    ARCHIVING = "archiving"
    PURGING = "purging"
    BACKOFF = "backoff"
    DONE = "done"
    FAILED = "failed"


class RecordOutcome(BaseModel):
    """
    Result of archiving and purging one record.

    Attributes:
        record_id: String form of the record identity
        archive_key: Destination object key the record was written to
        deleted_count: Documents removed from the source (0 if already absent)
    """

    record_id: str = Field(..., description="Record identity")
    archive_key: str = Field(..., description="Destination object key")
    deleted_count: int = Field(..., ge=0, le=1, description="Documents deleted")

    @property
    def already_absent(self) -> bool:
        return self.deleted_count == 0


class RunSummary(BaseModel):
    """
    Counters collected over a single run.

    Attributes:
        started_at: Clock reading taken once at run start
        cutoff: Eligibility boundary derived from started_at
        state: Final (or current) runner state
        archived: Records written to the destination
        purged: Records deleted from the source
        already_absent: Records archived whose source copy was already gone
        fetches: Batch fetches issued against the source
        throttle_pauses: Backoff pauses taken after throttling
    """

    started_at: datetime = Field(..., description="Run start timestamp")
    cutoff: Optional[datetime] = Field(None, description="Eligibility boundary")
    state: RunState = Field(RunState.IDLE, description="Runner state")
    archived: int = Field(0, ge=0)
    purged: int = Field(0, ge=0)
    already_absent: int = Field(0, ge=0)
    fetches: int = Field(0, ge=0)
    throttle_pauses: int = Field(0, ge=0)
    completed_at: Optional[datetime] = Field(None, description="Run completion timestamp")

    def record(self, outcome: RecordOutcome) -> None:
        self.archived += 1
        if outcome.already_absent:
            self.already_absent += 1
        else:
            self.purged += 1
