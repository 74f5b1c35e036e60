"""Daemon mode for automatic window restoration on screen changes."""

import logging
from collections import deque

from .backend import Clock, EventSource, WindowBackend
from .capture import capture_windows
from .clock import SystemClock
from .coalescer import EventCoalescer
from .config import Config
from .escalation import ForegroundEscalation
from .models import SnapshotSet, TopologyEvent
from .restore import RestoreOrchestrator
from .topology import TopologyState, TopologyWatcher, Transition

log = logging.getLogger(__name__)


class LayoutDaemon:
    """State machine tying capture, restore and escalation to screen events.

    While the original screens are present the window layout is captured
    again whenever things have been quiet for ``capture_debounce``. When
    they go away the last snapshot is kept untouched, and when they come
    back it is replayed once the event burst has settled.
    """

    def __init__(self, config: Config, backend: WindowBackend, source: EventSource,
                 clock: Clock):
        self.config = config
        self.backend = backend
        self.source = source
        self.clock = clock

        self.watcher = TopologyWatcher(config.original_size)
        self.coalescer = EventCoalescer(source, clock)
        self.restorer = RestoreOrchestrator(backend, clock, fullscreen_settle=config.fullscreen_settle)
        self.escalation = ForegroundEscalation(
            backend, clock,
            target=config.escalation_target,
            delay=config.escalation_delay,
            refresh_delay=config.activate_refresh,
        )

        self.snapshot: SnapshotSet | None = None
        self.restored_at: float | None = None
        self._queue: deque[TopologyEvent] = deque()

    @property
    def state(self) -> TopologyState:
        return self.watcher.state

    @property
    def last_activity(self) -> float | None:
        """Newest of the last screen event and the last restore, if any."""
        times = [t for t in (self.watcher.last_event_time, self.restored_at) if t is not None]
        return max(times, default=None)

    def capture_due(self) -> bool:
        if self.state is not TopologyState.PRESENT:
            return False
        last = self.last_activity
        if self.snapshot is None or last is None:
            return True
        return self.clock.monotonic() - last > self.config.capture_debounce

    def capture(self) -> SnapshotSet:
        self.snapshot, _ = capture_windows(self.backend, self.clock, self.config.exclude)
        return self.snapshot

    def run_once(self) -> None:
        """One poll cycle: maybe capture, sleep, then handle queued events."""
        # Events drained during the last restore settle may include a loss
        self.process_queue()

        # The screen may have changed right after the previous poll, so the
        # layout is only trusted once no event has been seen for a while.
        if self.capture_due():
            self.capture()

        self.clock.sleep(self.config.poll_period)

        self._queue.extend(self.source.pending())
        self.process_queue()

    def process_queue(self) -> None:
        """Feed queued events to the watcher in arrival order.

        Stops after a restore; whatever the settle drain collected stays
        queued for the next call.
        """
        while self._queue:
            event = self._queue.popleft()
            transition = self.watcher.observe(event)

            if transition is Transition.LOST:
                self.on_lost(event)
            elif transition is Transition.RESTORED:
                self.on_restored(event)
                break

    def on_lost(self, event: TopologyEvent) -> None:
        log.warning("Original screens lost (%d, %d)", event.width, event.height)
        self.escalation.escalate(self.snapshot)

    def on_restored(self, event: TopologyEvent) -> None:
        log.warning("Original screens detected")
        trailing = self.coalescer.drain(self.config.restore_settle)
        self._queue.extend(trailing)
        self.restorer.restore(self.snapshot)
        # The window manager applies the requests asynchronously
        self.restored_at = self.clock.monotonic()

    def run_forever(self) -> None:
        while True:
            self.run_once()


def run_daemon(config: Config, display_name: str | None = None) -> None:
    """Connect to the X server and watch for screen changes until interrupted.

    Raises ProtocolSetupError if the display or RandR cannot be used.
    """
    from .xbackend import XBackend, XEventSource, close_display, open_display

    display = open_display(display_name)
    try:
        clock = SystemClock()
        backend = XBackend(display)
        backend.check_support()
        source = XEventSource(display, clock)
        source.subscribe()

        log.info("Watching for screen changes (original size %dx%d)",
                 config.original_width, config.original_height)
        daemon = LayoutDaemon(config, backend, source, clock)
        try:
            daemon.run_forever()
        except KeyboardInterrupt:
            log.info("Daemon stopped.")
    finally:
        close_display(display)
