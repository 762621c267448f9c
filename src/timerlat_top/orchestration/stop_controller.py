"""
Cooperative cancellation for the monitor loop.
"""

import time
from typing import Callable

# Longest uninterrupted sleep while waiting for the next poll.
_WAIT_SLICE_SECONDS = 0.05


class StopController:
    """
    A stop flag written from signal handlers or timer threads and read by the
    monitor loop once per iteration.

    request_stop() only assigns a boolean: it takes no lock and allocates
    nothing, so it is safe from a signal handler that may run between any two
    bytecodes of the loop. All reactive work happens in the loop after it
    observes should_stop().
    """

    def __init__(self):
        self._stop_requested = False

    def request_stop(self) -> None:
        """Ask the loop to stop. Idempotent."""
        self._stop_requested = True

    def should_stop(self) -> bool:
        return self._stop_requested

    def wait(
        self,
        timeout: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> bool:
        """Sleep up to timeout seconds, returning early once a stop is requested.

        Returns:
            True if a stop was requested before or during the wait.
        """
        deadline = clock() + timeout
        while not self._stop_requested:
            remaining = deadline - clock()
            if remaining <= 0:
                break
            sleep(min(remaining, _WAIT_SLICE_SECONDS))
        return self._stop_requested
