"""Startup sensor: request one archive run each time the code server starts.

The sensor cursor stores a token identifying the current process. On the
first evaluation after a (re)start the token differs from the stored one, so
a single run is requested and the cursor updated; later evaluations skip.
"""

import uuid

from dagster import (
    DefaultSensorStatus,
    RunRequest,
    SensorEvaluationContext,
    SkipReason,
    sensor,
)

from ..jobs import archive_job

# One token per Python process hosting these definitions.
PROCESS_TOKEN = uuid.uuid4().hex


def _startup_run(context: SensorEvaluationContext, process_token: str):
    """
    Core logic for the startup sensor.

    Extracted for unit testing with an explicit process token.
    """
    if context.cursor == process_token:
        yield SkipReason("Startup archive run already requested for this process")
        return

    context.log.info(f"Process started ({process_token}); requesting startup archive run")
    context.update_cursor(process_token)
    yield RunRequest(
        run_key=f"startup:{process_token}",
        tags={"trigger": "startup"},
    )


@sensor(
    job=archive_job,
    minimum_interval_seconds=30,
    default_status=DefaultSensorStatus.RUNNING,
    name="archive_on_startup_sensor",
    description="Requests one archive run when the code server process starts",
)
def archive_on_startup_sensor(context: SensorEvaluationContext):
    yield from _startup_run(context, PROCESS_TOKEN)
