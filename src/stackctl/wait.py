"""Polling for asynchronous platform operations.

Create, update and delete calls return before the resource settles. A
WaitHandler calls a check function at a fixed interval until it reports
completion, raises on a failure state, or gives up at the deadline.

Usage:
    handler = WaitHandler(check, timeout=45 * 60, poll_interval=5)
    resource = handler.wait()
"""

import logging
import time
from collections.abc import Callable
from typing import Generic, TypeVar

from stackctl.exceptions import WaitTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WaitHandler(Generic[T]):
    """Poll a check function until done or timed out.

    check() returns (done, resource) and raises WaitError for failure states.
    """

    DEFAULT_TIMEOUT = 45 * 60
    DEFAULT_POLL_INTERVAL = 5.0

    def __init__(
        self,
        check: Callable[[], tuple[bool, T | None]],
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        description: str = "operation",
    ) -> None:
        self.check = check
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.description = description

    def wait(self) -> T | None:
        """Block until the check reports completion.

        Returns:
            The resource returned by the final check (may be None, e.g. after a delete)

        Raises:
            WaitError: Propagated from the check on a failure state
            WaitTimeoutError: If the deadline elapses first
        """
        start_time = time.monotonic()
        deadline = start_time + self.timeout
        attempt = 0

        while True:
            attempt += 1
            done, resource = self.check()
            if done:
                elapsed = time.monotonic() - start_time
                logger.debug(f"{self.description} finished after {elapsed:.0f}s ({attempt} checks)")
                return resource

            if time.monotonic() + self.poll_interval > deadline:
                break
            time.sleep(self.poll_interval)

        elapsed = time.monotonic() - start_time
        raise WaitTimeoutError(
            f"Timed out waiting for {self.description} after {elapsed:.0f} seconds"
        )


__all__ = ["WaitHandler"]
