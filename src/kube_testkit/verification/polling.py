"""Fixed-delay, fixed-attempt polling shared by the verifiers."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from kube_testkit.errors import PollCancelled, VerificationTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollPolicy(BaseModel):
    """How often and how long to poll. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    max_attempts: PositiveInt = Field(..., description="Number of checks before giving up")
    delay: float = Field(..., ge=0.0, description="Seconds between checks")

    @property
    def budget(self) -> float:
        """Total time budget, max_attempts * delay, reported in timeout errors."""
        return self.max_attempts * self.delay


def sleep_or_cancel(seconds: float, cancel: threading.Event | None = None) -> None:
    """Block for ``seconds``; raise PollCancelled as soon as ``cancel`` is set."""
    if cancel is not None and cancel.is_set():
        raise PollCancelled("Polling cancelled")
    if seconds <= 0:
        return
    if cancel is None:
        time.sleep(seconds)
    elif cancel.wait(seconds):
        raise PollCancelled("Polling cancelled")


def poll_until(
    check: Callable[[], T | None],
    policy: PollPolicy,
    description: str,
    waiting: str,
    cancel: threading.Event | None = None,
) -> T:
    """Call ``check`` until it returns something other than None.

    Checks run on a grid anchored at call entry (start + k * delay), so a slow
    check consumes its own slot instead of pushing the deadline out. The
    deadline start + budget is fixed at entry; once it has passed no further
    check is made.

    Args:
        check: Returns the satisfied value, or None if not satisfied yet
        policy: Attempt count and delay
        description: Unmet predicate, used in the timeout message
        waiting: Progress notice logged between attempts
        cancel: Optional cancel token

    Returns:
        The first non-None value returned by ``check``

    Raises:
        VerificationTimeout: the budget was exhausted
        PollCancelled: ``cancel`` was set while waiting
    """
    start = time.monotonic()
    deadline = start + policy.budget
    attempts = 0
    for attempt in range(1, policy.max_attempts + 1):
        result = check()
        attempts = attempt
        if result is not None:
            return result
        if attempt < policy.max_attempts:
            logger.warning("%s - retry in %gs", waiting, policy.delay)
        sleep_or_cancel(start + attempt * policy.delay - time.monotonic(), cancel)
        if attempt < policy.max_attempts and policy.delay > 0 and time.monotonic() >= deadline:
            logger.warning("Deadline passed after %d of %d attempts", attempt, policy.max_attempts)
            break
    raise VerificationTimeout(
        f"{description} after {attempts} attempts",
        timeout=policy.budget,
        attempts=attempts,
        elapsed=time.monotonic() - start,
    )
