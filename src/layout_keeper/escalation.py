"""Bring a chosen window to the front when the original screens go away."""

import logging

from .backend import FULLSCREEN, Clock, WindowBackend
from .errors import LayoutKeeperError
from .models import SnapshotSet, WindowHandle

log = logging.getLogger(__name__)


class ForegroundEscalation:
    """Activates the first captured window titled ``target``."""

    def __init__(self, backend: WindowBackend, clock: Clock, target: str | None,
                 delay: float = 0.0, refresh_delay: float = 3.0):
        self.backend = backend
        self.clock = clock
        self.target = target
        self.delay = delay
        self.refresh_delay = refresh_delay

    def escalate(self, snapshot_set: SnapshotSet | None) -> WindowHandle | None:
        """Raise the target window, returning its handle if one was raised."""
        if not self.target or snapshot_set is None:
            return None

        for snapshot in snapshot_set:
            try:
                title = self.backend.title(snapshot.handle)
            except LayoutKeeperError as e:
                log.warning("Couldn't read title for window: 0x%x, %s", snapshot.handle, e)
                continue

            if title != self.target:
                continue

            if self.delay > 0:
                self.clock.sleep(self.delay)

            try:
                self.activate(snapshot.handle)
            except LayoutKeeperError as e:
                log.error("Couldn't activate window: %s (0x%x), %s", title, snapshot.handle, e)
            else:
                log.info("Activated window: %s (0x%x)", title, snapshot.handle)
            return snapshot.handle

        log.debug("No window titled %r to activate", self.target)
        return None

    def activate(self, handle: WindowHandle) -> None:
        self.backend.activate(handle)

        # Fullscreen windows can stay broken after a screen change unless
        # they are taken out of fullscreen and put back.
        fullscreen = self.backend.intern(FULLSCREEN)
        if fullscreen in self.backend.wm_state(handle):
            self.backend.set_wm_state(handle, (fullscreen,), False)
            self.clock.sleep(self.refresh_delay)
            self.backend.set_wm_state(handle, (fullscreen,), True)
