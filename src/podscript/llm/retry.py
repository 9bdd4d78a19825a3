"""
Exponential back-off for blocking completion calls.

Only transient failures (HTTP 429 rate limits and explicit overload signals)
are retried. Anything else is raised on the first attempt. The loop gives up
once the total elapsed time passes ``max_elapsed`` and raises
RetryExhaustedError chained to the last transient error.
"""

import logging
import random
import time
from typing import Callable, Optional, TypeVar

from .errors import ProviderError, RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ELAPSED: float = 600.0     # 10 minutes
INITIAL_INTERVAL: float = 0.5  # seconds, first back-off delay
MULTIPLIER: float = 1.5
MAX_INTERVAL: float = 60.0
RANDOMIZATION: float = 0.5     # +/- 50% jitter


def is_transient(exc: Exception) -> bool:
    """Return True if the error is a rate limit or overload signal."""
    return isinstance(exc, ProviderError) and exc.is_transient


def retry_with_backoff(
    operation: Callable[[], T],
    *,
    max_elapsed: float = MAX_ELAPSED,
    initial_interval: float = INITIAL_INTERVAL,
    multiplier: float = MULTIPLIER,
    max_interval: float = MAX_INTERVAL,
    randomization: float = RANDOMIZATION,
    sleep: Optional[Callable[[float], None]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> T:
    """
    Call ``operation()`` until it succeeds, fails permanently, or time runs out.

    Args:
        operation: Zero-argument callable to invoke.
        max_elapsed: Total time budget in seconds.
        sleep: Defaults to time.sleep.
        clock: Defaults to time.monotonic.

    Returns:
        Whatever ``operation`` returns.

    Raises:
        The operation's own exception if it is permanent.
        RetryExhaustedError if transient errors persist past ``max_elapsed``.
    """
    sleep = sleep or time.sleep
    clock = clock or time.monotonic
    start = clock()
    interval = initial_interval
    attempt = 0

    while True:
        attempt += 1
        try:
            return operation()
        except Exception as exc:
            if not is_transient(exc):
                raise

            delay = interval * random.uniform(1 - randomization, 1 + randomization)
            elapsed = clock() - start
            if elapsed + delay > max_elapsed:
                logger.error(f"Giving up after {attempt} attempts ({elapsed:.1f}s): {exc}")
                raise RetryExhaustedError(exc, elapsed) from exc

            logger.warning(f"{exc} - retrying in {delay:.1f}s (attempt {attempt})")
            sleep(delay)
            interval = min(interval * multiplier, max_interval)
