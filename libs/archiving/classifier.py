# =============================================================================
# Failure Classifiers
# =============================================================================
# Decide whether a failure is throttling (pause and resume) or fatal (stop
# the run). The runner only sees the `is_retryable` capability, so the
# message match can be replaced by a structured status check without
# touching the run loop.
# =============================================================================

from typing import Iterable, Iterator, Optional, Protocol

from minio.error import S3Error
from pymongo.errors import OperationFailure

__all__ = [
    "FailureClassifier",
    "ThrottleMessageClassifier",
    "StatusCodeClassifier",
    "AnyClassifier",
    "default_classifier",
    "DEFAULT_THROTTLE_MESSAGE",
]

DEFAULT_THROTTLE_MESSAGE = "request rate is large"

# Cosmos DB for MongoDB reports throttling as OperationFailure code 16500.
COSMOS_THROTTLE_CODE = 16500
HTTP_TOO_MANY_REQUESTS = 429
S3_THROTTLE_CODES = frozenset({"SlowDown", "Throttling", "ThrottlingException", "RequestLimitExceeded"})


class FailureClassifier(Protocol):
    def is_retryable(self, error: BaseException) -> bool:
        ...


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """
    Yield the error and the errors it was explicitly raised from.

    Only `__cause__` is followed. An unrelated error raised while a throttle
    was being handled carries that throttle as `__context__` and must not be
    classified by it.
    """
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


class ThrottleMessageClassifier:
    """
    Match the provider's throttling phrase in the error message.

    Case-insensitive substring match against every error in the chain, so a
    driver error wrapped in StoreOperationError is still recognized.
    """

    def __init__(self, phrase: str = DEFAULT_THROTTLE_MESSAGE):
        if not phrase:
            raise ValueError("phrase must not be empty")
        self.phrase = phrase.lower()

    def is_retryable(self, error: BaseException) -> bool:
        return any(self.phrase in str(exc).lower() for exc in _error_chain(error))


class StatusCodeClassifier:
    """
    Structured throttling check on driver error codes.

    Recognizes pymongo OperationFailure codes (16500, 429 by default) and
    S3 errors carrying a throttling code (SlowDown and friends) or an HTTP
    429 response. Other 503s such as ServiceUnavailable are outages, not
    rate limiting, and stay fatal.
    """

    def __init__(self, codes: Iterable[int] = (COSMOS_THROTTLE_CODE, HTTP_TOO_MANY_REQUESTS)):
        self.codes = frozenset(codes)

    def _is_throttle(self, exc: BaseException) -> bool:
        if isinstance(exc, OperationFailure):
            return exc.code in self.codes
        if isinstance(exc, S3Error):
            if exc.code in S3_THROTTLE_CODES:
                return True
            return getattr(exc.response, "status", None) == HTTP_TOO_MANY_REQUESTS
        return False

    def is_retryable(self, error: BaseException) -> bool:
        return any(self._is_throttle(exc) for exc in _error_chain(error))


class AnyClassifier:
    """Retryable when any member classifier says so."""

    def __init__(self, *classifiers: FailureClassifier):
        if not classifiers:
            raise ValueError("AnyClassifier needs at least one classifier")
        self.classifiers = classifiers

    def is_retryable(self, error: BaseException) -> bool:
        return any(c.is_retryable(error) for c in self.classifiers)


def default_classifier(phrase: str = DEFAULT_THROTTLE_MESSAGE) -> AnyClassifier:
    """Message match plus structured status codes."""
    return AnyClassifier(ThrottleMessageClassifier(phrase), StatusCodeClassifier())
