"""Polling for remote lifecycle state transitions."""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Callable, Collection

from .. import metrics
from ..utils.errors import (
    PollCancelledError,
    ResourceNotFoundError,
    UnexpectedStateError,
    WaitTimeoutError,
)

logger = logging.getLogger(__name__)


def _next_delay(interval: float, jitter: float, remaining: float) -> float:
    delay = interval + random.uniform(0, jitter * interval)
    return max(0.0, min(delay, remaining))


def wait_for_state(
    observe: Callable[[], str | None],
    pending: Collection[str],
    target: Collection[str],
    timeout: float,
    *,
    interval: float = 5.0,
    jitter: float = 0.2,
    not_found_ok: bool = False,
    cancel_event: threading.Event | None = None,
    operation: str = "wait",
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> str | None:
    """Block until the observed lifecycle state reaches a target state.

    Args:
        observe: Callable returning the current lifecycle state. May raise
            ResourceNotFoundError when the resource no longer exists.
        pending: States in which to keep waiting
        target: States that end the wait successfully
        timeout: Deadline in seconds, measured from the first call
        interval: Base delay between observations
        jitter: Fraction of the interval added as random extra delay
        not_found_ok: Treat a missing resource as a successful terminal
            outcome (used while waiting for deletion)
        cancel_event: Event that aborts the wait when set
        operation: Label for logs and metrics
        sleep: Sleep function used when no cancel_event is given
        clock: Monotonic clock

    Returns:
        The target state reached, or None if the resource disappeared and
        not_found_ok is set

    Raises:
        UnexpectedStateError: If a state outside pending and target is observed
        WaitTimeoutError: If the deadline elapses while still pending
        PollCancelledError: If cancel_event is set
        ResourceNotFoundError: If the resource is missing and not_found_ok is unset
    """
    pending = set(pending)
    target = set(target)
    start = clock()
    deadline = start + timeout
    state: str | None = None
    attempt = 0
    result = "error"

    try:
        while True:
            if cancel_event is not None and cancel_event.is_set():
                result = "cancelled"
                raise PollCancelledError(f"{operation} cancelled while in state '{state}'")

            attempt += 1
            try:
                state = observe()
            except ResourceNotFoundError:
                if not_found_ok:
                    logger.info(f"{operation}: resource no longer exists, treating as deleted")
                    result = "not_found"
                    return None
                raise

            if state in target:
                logger.debug(f"{operation}: reached state {state} after {attempt} observation(s)")
                result = "success"
                return state

            if state not in pending:
                result = "unexpected_state"
                raise UnexpectedStateError(state, pending, target)

            remaining = deadline - clock()
            if remaining <= 0:
                result = "timeout"
                raise WaitTimeoutError(state, timeout, target)

            delay = _next_delay(interval, jitter, remaining)
            logger.debug(f"{operation}: state {state} is pending, next check in {delay:.1f}s")
            if cancel_event is not None:
                if cancel_event.wait(delay):
                    result = "cancelled"
                    raise PollCancelledError(f"{operation} cancelled while in state '{state}'")
            else:
                sleep(delay)
    finally:
        metrics.state_wait_duration_seconds.labels(operation=operation, result=result).observe(clock() - start)
