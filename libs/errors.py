# =============================================================================
# Archive Error Taxonomy
# =============================================================================
# Exception types shared by configuration loading and the export-and-purge
# core. Kept in a leaf module so both libs.models and libs.archiving can
# import it without cycles.
# =============================================================================

"""
Error types for the record archiver.

- ConfigError: required settings missing or unparsable (process start)
- StoreOperationError: a fetch, write or delete against a store failed
- ArchiveWriteError: the destination write for one record did not complete
- TransientRateLimitError: throttling persisted past the configured limit
"""

__all__ = [
    "ConfigError",
    "StoreOperationError",
    "ArchiveWriteError",
    "TransientRateLimitError",
]


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


class StoreOperationError(RuntimeError):
    """
    A source or destination store operation failed.

    The message of the underlying driver error is carried over verbatim so
    message-based failure classifiers still see it.
    """


class ArchiveWriteError(StoreOperationError):
    """The serialized record could not be written to the destination store."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class TransientRateLimitError(RuntimeError):
    """The backing store kept throttling after the allowed number of pauses."""

    def __init__(self, message: str, pauses: int):
        super().__init__(message)
        self.pauses = pauses
