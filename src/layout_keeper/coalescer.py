"""Absorb bursts of topology notifications."""

import logging
from collections import deque

from .backend import Clock, EventSource
from .models import TopologyEvent

log = logging.getLogger(__name__)


class EventCoalescer:
    """Collects notifications until the source has been quiet for a while.

    A single docking or undocking usually produces several screen change
    events in quick succession. Waiting for silence lets the caller act once
    the burst is over instead of once per event.
    """

    def __init__(self, source: EventSource, clock: Clock):
        self.source = source
        self.clock = clock

    def drain(self, timeout: float) -> deque[TopologyEvent]:
        """Wait until ``timeout`` seconds pass without a new notification.

        Every notification that arrives meanwhile is returned, oldest first,
        and restarts the quiet period.
        """
        queue: deque[TopologyEvent] = deque()
        deadline = self.clock.monotonic() + timeout

        while True:
            remaining = deadline - self.clock.monotonic()
            if remaining <= 0:
                break

            event = self.source.wait(remaining)
            if event is None:
                continue

            queue.append(event)
            deadline = self.clock.monotonic() + timeout

        if queue:
            log.debug("Drained %d trailing screen event(s)", len(queue))
        return queue
