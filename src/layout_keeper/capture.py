"""Window state capture."""

import logging
from collections.abc import Collection

from .backend import Clock, WindowBackend
from .errors import LayoutKeeperError
from .models import BatchOutcome, SnapshotSet, WindowSnapshot

log = logging.getLogger(__name__)


def capture_windows(backend: WindowBackend, clock: Clock,
                    exclude: Collection[str] = ()) -> tuple[SnapshotSet, BatchOutcome]:
    """
    Capture geometry and state flags of every top-level window.

    Windows whose title cannot be read, or whose geometry or state cannot be
    read, are logged and left out. Windows with an excluded title are
    skipped. Never raises.

    Args:
        backend: Window backend to read from
        clock: Clock used to stamp the snapshot
        exclude: Window titles to leave out

    Returns:
        tuple: (SnapshotSet, BatchOutcome)
    """
    outcome = BatchOutcome()
    excluded = frozenset(exclude)

    try:
        handles = backend.client_windows()
    except LayoutKeeperError as e:
        log.error("Couldn't enumerate windows: %s", e)
        return SnapshotSet(windows=(), captured_at=clock.monotonic()), outcome

    windows = []
    for handle in handles:
        try:
            title = backend.title(handle)
        except LayoutKeeperError as e:
            log.warning("Couldn't read title for window: 0x%x, %s", handle, e)
            outcome.fail(handle, e)
            continue

        if title in excluded:
            outcome.skipped += 1
            continue

        try:
            geometry = backend.geometry(handle)
            flags = backend.wm_state(handle)
        except LayoutKeeperError as e:
            log.warning("Couldn't capture window: 0x%x (%s), %s", handle, title, e)
            outcome.fail(handle, e, title=title)
            continue

        windows.append(WindowSnapshot(handle=handle, title=title, geometry=geometry, flags=tuple(flags)))
        outcome.succeed(handle, title)

    snapshot = SnapshotSet(windows=tuple(windows), captured_at=clock.monotonic())
    log.debug("Captured %d window(s): %s", len(snapshot), outcome.summary())
    return snapshot, outcome
