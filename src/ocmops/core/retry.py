"""Bounded retry with exponential backoff, jitter and an overall deadline.

Control-plane and cloud APIs are eventually consistent and occasionally
throttle. Callers wrap a single attempt in a function that reports whether
another attempt is worthwhile, and this module keeps calling it until it says
no, or until the deadline passes. Sleeping is blocking and only one attempt
is ever outstanding per call.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable

from ocmops.core.errors import RetryTimeoutError

Attempt = Callable[[], tuple[bool, Exception | None]]

_INITIAL_BACKOFF_SECONDS = 1
_MAX_JITTER_MILLIS = 250


def _jitter_seconds() -> float:
    """Return a random delay in [0, 250ms) to desynchronize concurrent callers."""
    return random.randrange(_MAX_JITTER_MILLIS) / 1000


def retry_with_backoff_and_timeout(
    fn: Attempt,
    timeout_seconds: float,
    logger: logging.Logger | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    jitter: Callable[[], float] = _jitter_seconds,
) -> None:
    """
    Call `fn` until it stops asking for a retry or the deadline elapses.

    `fn` returns `(should_retry, err)`. When `should_retry` is False the
    attempt is final: `err` is raised if set, otherwise the call returns.
    Between attempts the caller sleeps `backoff + jitter`, where backoff
    starts at one second and doubles after every retry without a cap.
    There is no attempt limit; only the deadline bounds the loop.

    Args:
        fn: A single attempt of the operation.
        timeout_seconds: Overall time budget for all attempts.
        logger: Optional logger that receives retry notices.
        sleep: Blocking sleep function (injectable for tests).
        clock: Monotonic clock in seconds (injectable for tests).
        jitter: Source of the random extra delay in seconds.

    Raises:
        RetryTimeoutError: The deadline elapsed before `fn` stopped asking
            for a retry, including when a pending backoff would cross it.
        Exception: Whatever error `fn` reported with its final attempt.
    """
    deadline = clock() + timeout_seconds
    backoff = _INITIAL_BACKOFF_SECONDS

    while True:
        should_retry, err = fn()
        if not should_retry:
            if err is not None:
                raise err
            return

        remaining = deadline - clock()
        if remaining <= 0:
            raise RetryTimeoutError(timeout_seconds, last_error=err)

        if logger is not None:
            logger.info("Trying again in %d seconds...", backoff)

        delay = backoff + jitter()
        backoff *= 2

        # Never start another attempt after the deadline.
        if delay >= remaining:
            sleep(remaining)
            raise RetryTimeoutError(timeout_seconds, last_error=err)

        sleep(delay)
