"""Time source used by every timed wait in the daemon."""

import time


class SystemClock:
    """Monotonic wall clock backed by the time module."""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
