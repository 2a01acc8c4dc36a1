# =============================================================================
# Throttle-Aware Runner
# =============================================================================
# Drives one archive run: build the filter, stream eligible records, and for
# each record archive then purge, strictly in sequence. Throttling errors
# pause the run and resume it from the last fully processed record; every
# other error ends the run.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from libs.errors import TransientRateLimitError
from libs.models import RecordOutcome, RunState, RunSummary

from .archiver import RecordArchiver
from .backoff import RandomizedBackoff
from .classifier import FailureClassifier, default_classifier
from .cursor import BatchCursor
from .filters import build_filter
from .purger import RecordPurger

__all__ = ["ThrottleAwareRunner", "utc_now"]

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ThrottleAwareRunner:
    """
    Orchestrates archive-then-purge over a streamed result set.

    State flow::

        idle -> streaming -> (archiving -> purging -> streaming)* -> done
                     \\___ any step may fail ___/
                          throttled -> backoff -> streaming (re-opened)
                          otherwise -> failed (error re-raised)

    After a backoff the cursor is re-opened with the same filter, resuming
    strictly after the last record whose purge completed. The interrupted
    record is therefore archived again (same key, same bytes) before it is
    purged, and records purged earlier in the run no longer match the filter.

    Args:
        cursor: Opens record streams on the source store
        archiver: Writes records to the destination store
        purger: Deletes records from the source store
        retention_window: Minimum record age
        batch_size: Records per source fetch
        created_at_field: Creation timestamp field used by the filter
        id_field: Identity field, used to track the resume position
        classifier: Decides which failures are throttling
        backoff: Pause applied after throttling
        clock: Wall clock, read at run start (fixes the filter) and at completion
        max_consecutive_throttles: Raise TransientRateLimitError after this many
            pauses without a record completing (None = keep retrying)
        log: Logger (Dagster's context.log inside ops)
    """

    def __init__(
        self,
        cursor: BatchCursor,
        archiver: RecordArchiver,
        purger: RecordPurger,
        retention_window: timedelta,
        batch_size: int = 20,
        created_at_field: str = "_created_at",
        id_field: str = "_id",
        classifier: Optional[FailureClassifier] = None,
        backoff: Optional[RandomizedBackoff] = None,
        clock: Callable[[], datetime] = utc_now,
        max_consecutive_throttles: Optional[int] = None,
        log=None,
    ):
        self._cursor = cursor
        self._archiver = archiver
        self._purger = purger
        self._retention_window = retention_window
        self._batch_size = batch_size
        self._created_at_field = created_at_field
        self._id_field = id_field
        self._classifier = classifier or default_classifier()
        self._backoff = backoff or RandomizedBackoff()
        self._clock = clock
        self._max_consecutive_throttles = max_consecutive_throttles
        self._log = log or logger
        self.state = RunState.IDLE

    def _transition(self, state: RunState) -> None:
        self.state = state

    def _process(self, record: dict) -> RecordOutcome:
        record_id = record.get(self._id_field)

        self._transition(RunState.ARCHIVING)
        key = self._archiver.archive(record)

        self._transition(RunState.PURGING)
        deleted = self._purger.purge(record_id)

        self._transition(RunState.STREAMING)
        return RecordOutcome(record_id=str(record_id), archive_key=key, deleted_count=deleted)

    def run(self) -> RunSummary:
        """
        Execute one archive run.

        Returns:
            RunSummary with state DONE once the cursor is exhausted

        Raises:
            TransientRateLimitError: Throttling exceeded max_consecutive_throttles
            Exception: Any non-throttling failure, re-raised unchanged
        """
        now = self._clock()
        summary = RunSummary(started_at=now)
        self._log.info(
            f"Archive run started: now={now.isoformat()}, "
            f"retention_window={self._retention_window}, batch_size={self._batch_size}"
        )

        predicate = None
        resume_after: Optional[Any] = None
        consecutive_throttles = 0

        while True:
            stream = None
            try:
                if predicate is None:
                    predicate = build_filter(
                        self._retention_window, now, field=self._created_at_field
                    )
                    summary.cutoff = predicate.cutoff
                    self._log.info(f"Archiving records with {predicate.field} < {predicate.cutoff.isoformat()}")

                self._transition(RunState.STREAMING)
                stream = self._cursor.open(predicate, self._batch_size, after=resume_after)
                for record in stream:
                    outcome = self._process(record)
                    resume_after = record[self._id_field]
                    consecutive_throttles = 0
                    summary.record(outcome)

                summary.fetches += stream.fetches
                break

            except Exception as exc:
                if stream is not None:
                    summary.fetches += stream.fetches

                if not self._classifier.is_retryable(exc):
                    failed_in = self.state
                    self._transition(RunState.FAILED)
                    summary.state = self.state
                    self._log.error(
                        f"Archive run failed while {failed_in.value} after "
                        f"{summary.archived} records: {exc!r}",
                        exc_info=True,
                    )
                    raise

                consecutive_throttles += 1
                if (
                    self._max_consecutive_throttles is not None
                    and consecutive_throttles > self._max_consecutive_throttles
                ):
                    self._transition(RunState.FAILED)
                    summary.state = self.state
                    self._log.error(
                        f"Giving up after {consecutive_throttles - 1} consecutive throttling pauses"
                    )
                    raise TransientRateLimitError(
                        f"Source or destination store still throttling after "
                        f"{consecutive_throttles - 1} pauses: {exc}",
                        pauses=consecutive_throttles - 1,
                    ) from exc

                self._transition(RunState.BACKOFF)
                delay = self._backoff.pause()
                summary.throttle_pauses += 1
                self._log.warning(
                    f"Throttled ({exc}); paused {delay:.2f}s, resuming after {resume_after!r}"
                )

        self._transition(RunState.DONE)
        summary.state = self.state
        summary.completed_at = self._clock()
        self._log.info(
            f"Archive run finished: archived={summary.archived}, purged={summary.purged}, "
            f"already_absent={summary.already_absent}, fetches={summary.fetches}, "
            f"throttle_pauses={summary.throttle_pauses}"
        )
        return summary
