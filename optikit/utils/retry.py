"""Fixed-delay retry for flaky operations.

Every failure is retried the same way: there is no backoff growth, no
jitter and no distinction between transient and permanent errors. After
the last attempt the final exception propagates unchanged.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_call(
    action: Callable[[], T],
    max_attempts: int,
    delay_seconds: float,
    on_failure: Optional[Callable[[Exception, int], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call `action` until it succeeds or `max_attempts` calls have failed.

    Args:
        action: Zero-argument callable to attempt.
        max_attempts: Total number of calls allowed (at least 1).
        delay_seconds: Pause between a failure and the next attempt.
        on_failure: Called with (exception, attempt) after each failed attempt,
            before the pause.
        sleep: Sleep function, replaceable in tests.

    Returns:
        The first successful result of `action`.

    Raises:
        ValueError: If max_attempts is less than 1.
        Exception: Whatever the final attempt raised.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    for attempt in range(1, max_attempts + 1):
        try:
            return action()
        except Exception as e:
            logger.warning("Attempt %d/%d failed: %s", attempt, max_attempts, e)
            if on_failure:
                on_failure(e, attempt)
            if attempt == max_attempts:
                raise
            sleep(delay_seconds)

    raise RuntimeError("Unexpected retry loop termination")

