"""Window position restoration."""

import logging

from .backend import FULLSCREEN, MAXIMIZED_HORZ, MAXIMIZED_VERT, Clock, WindowBackend
from .errors import LayoutKeeperError
from .models import BatchOutcome, SnapshotSet, WindowSnapshot

log = logging.getLogger(__name__)


class RestoreOrchestrator:
    """Moves windows back to where a snapshot recorded them.

    Window managers ignore move/resize requests for maximized or fullscreen
    windows, so those states are cleared first and put back afterwards.
    Fullscreen is asserted last, after a pause, because toggling it right
    after other state changes does not stick.
    """

    def __init__(self, backend: WindowBackend, clock: Clock, fullscreen_settle: float = 1.0):
        self.backend = backend
        self.clock = clock
        self.fullscreen_settle = fullscreen_settle

    def restore_window(self, snapshot: WindowSnapshot) -> None:
        """Restore one window. Raises LayoutKeeperError on the first failed step."""
        backend = self.backend
        handle = snapshot.handle
        max_vert = backend.intern(MAXIMIZED_VERT)
        max_horz = backend.intern(MAXIMIZED_HORZ)
        fullscreen = backend.intern(FULLSCREEN)

        current = backend.wm_state(handle)
        log.debug("Window 0x%x keeps state %s", handle,
                  [flag for flag in current if flag not in (max_vert, max_horz, fullscreen)])

        if fullscreen in current:
            log.info("Removing fullscreen state from window %s", snapshot.title)
            backend.set_wm_state(handle, (fullscreen,), False)
            backend.sync()

        backend.set_wm_state(handle, (max_vert, max_horz), False)
        backend.move_resize(handle, snapshot.geometry)

        if snapshot.flags:
            backend.set_wm_state(handle, snapshot.flags, True)

        if fullscreen in snapshot.flags:
            self.clock.sleep(self.fullscreen_settle)
            backend.set_wm_state(handle, (fullscreen,), True)

    def restore(self, snapshot_set: SnapshotSet | None) -> BatchOutcome:
        """
        Restore every window in a snapshot.

        Each window is handled on its own: a failure is logged and the next
        window is tried. Nothing is retried.

        Args:
            snapshot_set: Snapshot to replay, None means nothing was captured

        Returns:
            BatchOutcome: per-window results
        """
        outcome = BatchOutcome()
        if snapshot_set is None:
            log.warning("No window state captured, nothing to restore")
            return outcome

        for snapshot in snapshot_set:
            log.info("Restoring window: %s -> %s", snapshot.title, snapshot.geometry)
            try:
                self.restore_window(snapshot)
            except LayoutKeeperError as e:
                log.error("Error while restoring window: 0x%x, %s", snapshot.handle, e)
                outcome.fail(snapshot.handle, e, title=snapshot.title)
            else:
                outcome.succeed(snapshot.handle, snapshot.title)

        log.info("Restore finished: %s", outcome.summary())
        return outcome
