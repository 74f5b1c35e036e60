"""X11 implementation of the window backend and topology event source.

Windows are found through EWMH (``_NET_CLIENT_LIST``) and changed by sending
client messages to the root window, the same way pagers do. Screen changes
come from the RandR extension.
"""

import logging
import select
from collections import deque

import Xlib.display
import Xlib.error
from Xlib import X, Xatom
from Xlib.ext import randr
from Xlib.protocol import event as xevent

from .backend import Clock
from .errors import ProtocolSetupError, SendFailure, TransientWindowError
from .models import Geometry, StateFlags, TopologyEvent, WindowHandle

log = logging.getLogger(__name__)

# _NET_MOVERESIZE_WINDOW: x, y, width and height are present
MOVERESIZE_FLAGS = (1 << 8) | (1 << 9) | (1 << 10) | (1 << 11)

# _NET_WM_STATE actions
STATE_REMOVE = 0
STATE_ADD = 1

# Source indication for requests coming from a pager-like tool
SOURCE_PAGER = 2

X_ERRORS = (Xlib.error.XError, Xlib.error.ConnectionClosedError)


def open_display(name: str | None = None) -> Xlib.display.Display:
    """Connect to the X server, raising ProtocolSetupError on failure."""
    try:
        return Xlib.display.Display(name)
    except Xlib.error.DisplayError as e:
        raise ProtocolSetupError(f"Failed to open display: {e}") from e


def close_display(display: Xlib.display.Display) -> None:
    """Release the display connection, tolerating one the server already dropped."""
    try:
        display.close()
    except Xlib.error.ConnectionClosedError as e:
        log.debug("Display connection already closed: %s", e)


def pack_client_data(values) -> list[int]:
    """Fit values into the five 32-bit slots of a client message."""
    data = [int(v) & 0xFFFFFFFF for v in values][:5]
    return data + [0] * (5 - len(data))


def state_messages(flags: StateFlags, enable: bool) -> list[list[int]]:
    """Split flags into _NET_WM_STATE payloads of at most two properties each."""
    action = STATE_ADD if enable else STATE_REMOVE
    messages = []
    for i in range(0, len(flags), 2):
        pair = list(flags[i:i + 2])
        if len(pair) == 1:
            pair.append(0)
        messages.append(pack_client_data([action, *pair, SOURCE_PAGER]))
    return messages


class XBackend:
    """Window backend talking to an X server through python-xlib."""

    def __init__(self, display: Xlib.display.Display):
        self.display = display
        self.root = display.screen().root
        self._atoms: dict[str, int] = {}

    def intern(self, name: str) -> int:
        atom = self._atoms.get(name)
        if atom is None:
            atom = self._atoms[name] = self.display.intern_atom(name)
        return atom

    def check_support(self) -> None:
        """Verify the server and window manager provide what the daemon needs."""
        if not self.display.has_extension("RANDR"):
            raise ProtocolSetupError("X11 RandR extension is not available")

        try:
            supported = self._property(self.root, "_NET_SUPPORTED", Xatom.ATOM)
        except X_ERRORS as e:
            raise ProtocolSetupError(f"Cannot read _NET_SUPPORTED: {e}") from e

        if supported is None:
            raise ProtocolSetupError("Window manager does not support _NET_SUPPORTED")

        atoms = frozenset(supported.value)
        if self.intern("_NET_CLIENT_LIST") not in atoms:
            raise ProtocolSetupError("Window manager does not support _NET_CLIENT_LIST")
        if self.intern("_NET_MOVERESIZE_WINDOW") not in atoms:
            log.warning("Window manager does not advertise _NET_MOVERESIZE_WINDOW, "
                        "windows may not move")

    def _window(self, handle: WindowHandle):
        return self.display.create_resource_object("window", handle)

    def _property(self, window, name: str, prop_type: int):
        prop = window.get_full_property(self.intern(name), prop_type)
        if prop is None or prop.property_type != prop_type:
            return None
        return prop

    def client_windows(self) -> list[WindowHandle]:
        try:
            prop = self._property(self.root, "_NET_CLIENT_LIST", Xatom.WINDOW)
        except X_ERRORS as e:
            raise TransientWindowError(self.root.id, f"cannot read _NET_CLIENT_LIST: {e}") from e
        if prop is None:
            raise TransientWindowError(self.root.id, "_NET_CLIENT_LIST is not set")
        return [int(w) for w in prop.value]

    def title(self, handle: WindowHandle) -> str:
        try:
            prop = self._property(self._window(handle), "_NET_WM_NAME", self.intern("UTF8_STRING"))
        except X_ERRORS as e:
            raise TransientWindowError(handle, f"cannot read _NET_WM_NAME: {e}") from e
        if prop is None:
            raise TransientWindowError(handle, "_NET_WM_NAME is not set")

        value = prop.value
        if isinstance(value, bytes):
            value = value.decode("utf-8", "replace")
        return value

    def geometry(self, handle: WindowHandle) -> Geometry:
        window = self._window(handle)
        try:
            geom = window.get_geometry()
            coords = self.root.translate_coords(window, 0, 0)
        except X_ERRORS as e:
            raise TransientWindowError(handle, f"cannot read geometry: {e}") from e
        return Geometry(x=coords.x, y=coords.y, width=geom.width, height=geom.height)

    def wm_state(self, handle: WindowHandle) -> StateFlags:
        try:
            prop = self._property(self._window(handle), "_NET_WM_STATE", Xatom.ATOM)
        except X_ERRORS as e:
            raise TransientWindowError(handle, f"cannot read _NET_WM_STATE: {e}") from e
        # An absent property means no state is set
        if prop is None:
            return ()
        return tuple(int(atom) for atom in prop.value)

    def _send(self, handle: WindowHandle, message: str, data: list[int]) -> None:
        event = xevent.ClientMessage(
            window=self._window(handle),
            client_type=self.intern(message),
            data=(32, pack_client_data(data)),
        )
        log.debug("Sending %s to 0x%x: %s", message, handle, data)
        try:
            self.root.send_event(event, event_mask=X.SubstructureRedirectMask | X.SubstructureNotifyMask)
            self.display.flush()
        except X_ERRORS + (OSError,) as e:
            raise SendFailure(handle, f"failed to send {message}: {e}") from e

    def set_wm_state(self, handle: WindowHandle, flags: StateFlags, enable: bool) -> None:
        for data in state_messages(flags, enable):
            self._send(handle, "_NET_WM_STATE", data)

    def move_resize(self, handle: WindowHandle, geometry: Geometry) -> None:
        self._send(handle, "_NET_MOVERESIZE_WINDOW",
                   [MOVERESIZE_FLAGS, geometry.x, geometry.y, geometry.width, geometry.height])

    def activate(self, handle: WindowHandle) -> None:
        self._send(handle, "_NET_ACTIVE_WINDOW", [SOURCE_PAGER, X.CurrentTime, 0])
        window = self._window(handle)
        try:
            window.map()
            window.configure(stack_mode=X.Above)
            self.display.flush()
        except X_ERRORS + (OSError,) as e:
            raise SendFailure(handle, f"failed to raise window: {e}") from e

    def sync(self) -> None:
        try:
            self.display.sync()
        except X_ERRORS as e:
            raise SendFailure(self.root.id, f"sync failed: {e}") from e


class XEventSource:
    """RandR screen change notifications from the root window."""

    def __init__(self, display: Xlib.display.Display, clock: Clock):
        self.display = display
        self.clock = clock
        self._buffer: deque[TopologyEvent] = deque()
        self._event_type: int | None = None

    def subscribe(self) -> None:
        """Ask the server for RRScreenChangeNotify events."""
        if not self.display.has_extension("RANDR"):
            raise ProtocolSetupError("X11 RandR extension is not available")
        try:
            self.display.screen().root.xrandr_select_input(randr.RRScreenChangeNotifyMask)
            self.display.flush()
        except X_ERRORS as e:
            raise ProtocolSetupError(f"xrandr_select_input failed: {e}") from e

        self._event_type = self.display.extension_event.ScreenChangeNotify
        log.debug("Subscribed to RandR screen change events")

    def _fill(self) -> None:
        try:
            while self.display.pending_events():
                event = self.display.next_event()
                if event.type != self._event_type:
                    continue
                self._buffer.append(TopologyEvent(
                    width=event.width_in_pixels,
                    height=event.height_in_pixels,
                    timestamp=self.clock.monotonic(),
                ))
        except Xlib.error.ConnectionClosedError as e:
            raise ProtocolSetupError(f"Display connection closed: {e}") from e

    def pending(self) -> list[TopologyEvent]:
        self._fill()
        events = list(self._buffer)
        self._buffer.clear()
        return events

    def wait(self, timeout: float) -> TopologyEvent | None:
        self._fill()
        if not self._buffer:
            fd = self.display.fileno()
            readable, _, _ = select.select([fd], [], [], max(timeout, 0))
            if readable:
                self._fill()
        if self._buffer:
            return self._buffer.popleft()
        return None
