"""Archive job: move aging records from the live collection to cold storage."""

from dagster import job

from ..ops import archive_expired_records


@job(
    name="archive_job",
    description="Archives records older than the retention window to object storage, then deletes them from the source collection",
    tags={"job_type": "archive"},
)
def archive_job():
    """
    Scheduled archive job.

    Single-op pipeline: records are processed one at a time, archive then
    purge, so no downstream ops are needed.
    """
    archive_expired_records()
