"""Randomized pause used after throttling."""

import random
import time
from typing import Callable, Optional

__all__ = ["RandomizedBackoff"]


class RandomizedBackoff:
    """
    Uniformly distributed pause within a fixed window.

    Randomness and sleeping are injected so tests can assert the bounds
    deterministically.

    Args:
        min_seconds: Lower bound of the pause
        max_seconds: Upper bound of the pause
        rng: Source of randomness (defaults to an unseeded random.Random)
        sleep: Blocking sleep function (defaults to time.sleep)
    """

    def __init__(
        self,
        min_seconds: float = 1.5,
        max_seconds: float = 3.0,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_seconds < 0 or max_seconds < 0:
            raise ValueError("backoff bounds must be non-negative")
        if min_seconds > max_seconds:
            raise ValueError(f"min_seconds ({min_seconds}) exceeds max_seconds ({max_seconds})")
        self.min_seconds = min_seconds
        self.max_seconds = max_seconds
        self._rng = rng or random.Random()
        self._sleep = sleep

    def next_delay(self) -> float:
        return self._rng.uniform(self.min_seconds, self.max_seconds)

    def pause(self) -> float:
        """Sleep for a fresh random delay and return it."""
        delay = self.next_delay()
        self._sleep(delay)
        return delay
