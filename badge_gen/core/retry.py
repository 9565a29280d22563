"""
Retry with exponential backoff.

Generic bounded retry wrapper used around provider calls.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from badge_gen.config.loader import RetryConfig

T = TypeVar("T")

logger = logging.getLogger(__name__)


def retry_with_backoff(
    fn: Callable[[], T],
    config: RetryConfig,
    retry_on: Optional[Callable[[Exception], bool]] = None,
    sleep: Callable[[float], None] = time.sleep
) -> T:
    """Call ``fn`` until it succeeds or the attempt budget is used up.

    The first attempt runs immediately. After each failure the wait starts
    at ``initial_delay_ms`` and is multiplied by ``backoff_multiplier`` for
    the next wait, capped at ``max_delay_ms``.

    Args:
        fn: Zero-argument callable to execute
        config: Retry configuration
        retry_on: Optional predicate; a failure for which it returns False is
            re-raised at once without further attempts
        sleep: Sleep function taking seconds (injectable for tests)

    Returns:
        The first successful result of ``fn``

    Raises:
        Exception: The last failure, unchanged, once attempts are exhausted
    """
    delay_ms = float(config.initial_delay_ms)

    for attempt in range(1, config.max_attempts + 1):
        try:
            return fn()
        except Exception as e:
            if attempt >= config.max_attempts:
                raise
            if retry_on is not None and not retry_on(e):
                raise

            logger.warning(
                "Attempt %d/%d failed: %s. Retrying in %.0fms",
                attempt, config.max_attempts, e, delay_ms
            )
            sleep(delay_ms / 1000.0)
            delay_ms = min(delay_ms * config.backoff_multiplier, float(config.max_delay_ms))

    # max_attempts >= 1 is enforced by RetryConfig, so the loop always returns or raises
    raise RuntimeError("retry loop exited without a result")
