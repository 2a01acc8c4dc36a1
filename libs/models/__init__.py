# =============================================================================
# Data Models Library
# =============================================================================
# Pydantic models and settings for the Record Archiver.
# =============================================================================

"""
Data models for the record archiver.

This library provides:
- ExportFilter: Eligibility predicate for aging records
- Run models: RunState, RecordOutcome, RunSummary
- Configuration models
"""

__version__ = "0.1.0"

# Filter model
from .export_filter import (
    ExportFilter,
    to_store_datetime,
)

# Run models
from .run import (
    RunState,
    RecordOutcome,
    RunSummary,
)

# Configuration models
from .config import (
    ArchivePolicySettings,
    SourceSettings,
    DestinationSettings,
    ArchiveSettings,
    load_archive_settings,
)

__all__ = [
    # Filter model
    "ExportFilter",
    "to_store_datetime",
    # Run models
    "RunState",
    "RecordOutcome",
    "RunSummary",
    # Configuration models
    "ArchivePolicySettings",
    "SourceSettings",
    "DestinationSettings",
    "ArchiveSettings",
    "load_archive_settings",
]
