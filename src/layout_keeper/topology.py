"""Classify screen change notifications against the original topology."""

import enum

from .models import TopologyEvent


class Transition(enum.Enum):
    LOST = "lost"
    RESTORED = "restored"


class TopologyState(enum.Enum):
    PRESENT = "present"
    LOST = "lost"


class TopologyWatcher:
    """Tracks whether the screen still has its original size."""

    def __init__(self, original_size: tuple[int, int]):
        self.original_size = original_size
        # Nothing says otherwise until the first notification
        self.present = True
        self.last_event_time: float | None = None

    @property
    def state(self) -> TopologyState:
        return TopologyState.PRESENT if self.present else TopologyState.LOST

    def matches(self, event: TopologyEvent) -> bool:
        return event.size == self.original_size

    def observe(self, event: TopologyEvent) -> Transition | None:
        """Record ``event`` and return the transition it causes, if any."""
        # Any notification shows the screen configuration is still moving.
        self.last_event_time = event.timestamp

        matches = self.matches(event)
        if matches == self.present:
            return None

        self.present = matches
        return Transition.RESTORED if matches else Transition.LOST
