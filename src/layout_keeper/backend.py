"""Interfaces the core uses to talk to the windowing system.

The X11 implementation lives in ``xbackend``; tests provide in-memory fakes.
"""

from typing import Protocol

from .models import Geometry, StateFlags, TopologyEvent, WindowHandle

# EWMH state atoms the restore algorithm has to treat specially.
MAXIMIZED_VERT = "_NET_WM_STATE_MAXIMIZED_VERT"
MAXIMIZED_HORZ = "_NET_WM_STATE_MAXIMIZED_HORZ"
FULLSCREEN = "_NET_WM_STATE_FULLSCREEN"


class Clock(Protocol):
    def monotonic(self) -> float: ...

    def sleep(self, seconds: float) -> None: ...


class WindowBackend(Protocol):
    """Reads and writes top-level window state.

    Read methods raise ``TransientWindowError``; write methods raise
    ``SendFailure``.
    """

    def intern(self, name: str) -> int:
        """Return the atom for ``name``."""
        ...

    def client_windows(self) -> list[WindowHandle]:
        """Return the managed top-level windows, in window manager order."""
        ...

    def title(self, handle: WindowHandle) -> str: ...

    def geometry(self, handle: WindowHandle) -> Geometry: ...

    def wm_state(self, handle: WindowHandle) -> StateFlags: ...

    def set_wm_state(self, handle: WindowHandle, flags: StateFlags, enable: bool) -> None: ...

    def move_resize(self, handle: WindowHandle, geometry: Geometry) -> None: ...

    def activate(self, handle: WindowHandle) -> None: ...

    def sync(self) -> None:
        """Block until the server has processed every request sent so far."""
        ...


class EventSource(Protocol):
    """Delivers topology notifications in arrival order."""

    def pending(self) -> list[TopologyEvent]:
        """Return every notification already available, without blocking."""
        ...

    def wait(self, timeout: float) -> TopologyEvent | None:
        """Wait at most ``timeout`` seconds for the next notification.

        May return None before the timeout expires.
        """
        ...
