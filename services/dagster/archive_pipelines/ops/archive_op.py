# =============================================================================
# Archive Op - Document Store to Cold Object Storage
# =============================================================================
# Archives records older than the retention window to the object store and
# purges them from the live collection.
# =============================================================================

import random
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

from dagster import MetadataValue, OpExecutionContext, Out, Output, op

from libs.archiving import (
    BatchCursor,
    RandomizedBackoff,
    RecordArchiver,
    RecordPurger,
    ThrottleAwareRunner,
    default_classifier,
    utc_now,
)
from libs.models import RunSummary


def _archive_expired_records(
    mongodb,
    minio,
    policy,
    log,
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], datetime] = utc_now,
) -> RunSummary:
    """
    Core logic for one archive run.

    This function is extracted for easier unit testing without Dagster context.

    Args:
        mongodb: MongoDBResource (or any object with find_page/delete_by_id/collection)
        minio: MinIOResource (or any object with put_text)
        policy: ArchivePolicyResource
        log: Logger instance (context.log)
        rng: Randomness for the backoff pause
        sleep: Sleep function for the backoff pause
        clock: Wall clock, read at run start and at completion

    Returns:
        RunSummary for the completed run

    Raises:
        Exception: Any non-throttling store failure, after it has been logged
    """
    log.info(
        f"Starting archive of '{mongodb.collection}' to bucket '{minio.bucket}' "
        f"(retention={policy.retention_window_days}d, batch_size={policy.batch_size})"
    )

    runner = ThrottleAwareRunner(
        cursor=BatchCursor(mongodb, id_field=policy.id_field, log=log),
        archiver=RecordArchiver(
            minio,
            collection=mongodb.collection,
            id_field=policy.id_field,
            created_at_field=policy.created_at_field,
            log=log,
        ),
        purger=RecordPurger(mongodb, id_field=policy.id_field, log=log),
        retention_window=timedelta(days=policy.retention_window_days),
        batch_size=policy.batch_size,
        created_at_field=policy.created_at_field,
        id_field=policy.id_field,
        classifier=default_classifier(policy.throttle_message),
        backoff=RandomizedBackoff(
            policy.backoff_min_seconds,
            policy.backoff_max_seconds,
            rng=rng,
            sleep=sleep,
        ),
        clock=clock,
        max_consecutive_throttles=policy.max_consecutive_throttles,
        log=log,
    )
    return runner.run()


@op(
    out={"summary": Out(dagster_type=dict)},
    required_resource_keys={"mongodb", "minio", "archive_policy"},
)
def archive_expired_records(context: OpExecutionContext):
    """
    Archive aging records to cold storage and remove them from the live store.

    For every record older than the retention window, the full document is
    written to ``{collection}/{createdAt:yyyyMMddHHmmss}_{id}.json`` in the
    archive bucket and only then deleted from the source collection.
    Throttling responses pause the run for a random 1.5-3s (by default) and
    resume it; any other failure fails the op.

    Args:
        context: Dagster op execution context

    Returns:
        Output wrapping the run summary dict, with the counters attached as
        metadata
    """
    summary = _archive_expired_records(
        mongodb=context.resources.mongodb,
        minio=context.resources.minio,
        policy=context.resources.archive_policy,
        log=context.log,
    )

    return Output(
        summary.model_dump(mode="json"),
        output_name="summary",
        metadata={
            "archived": MetadataValue.int(summary.archived),
            "purged": MetadataValue.int(summary.purged),
            "already_absent": MetadataValue.int(summary.already_absent),
            "fetches": MetadataValue.int(summary.fetches),
            "throttle_pauses": MetadataValue.int(summary.throttle_pauses),
            "cutoff": MetadataValue.text(
                summary.cutoff.isoformat() if summary.cutoff else ""
            ),
        },
    )
