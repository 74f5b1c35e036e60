"""Shared fixtures: a fake clock, event source and window backend."""

from collections import deque
from dataclasses import dataclass, field

import pytest

from layout_keeper.backend import FULLSCREEN, MAXIMIZED_HORZ, MAXIMIZED_VERT
from layout_keeper.errors import SendFailure, TransientWindowError
from layout_keeper.models import Geometry, TopologyEvent

ATOMS = {
    MAXIMIZED_VERT: 301,
    MAXIMIZED_HORZ: 302,
    FULLSCREEN: 303,
    "_NET_WM_STATE_ABOVE": 304,
    "_NET_WM_STATE_STICKY": 305,
}
MAX_VERT = ATOMS[MAXIMIZED_VERT]
MAX_HORZ = ATOMS[MAXIMIZED_HORZ]
FULL = ATOMS[FULLSCREEN]
ABOVE = ATOMS["_NET_WM_STATE_ABOVE"]
STICKY = ATOMS["_NET_WM_STATE_STICKY"]


class FakeClock:
    """Clock that only moves when something sleeps or waits."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if seconds > 0:
            self.now += seconds


class FakeEventSource:
    """Replays (arrival_time, width, height) notifications against a FakeClock."""

    def __init__(self, clock: FakeClock, schedule=()):
        self.clock = clock
        self.schedule = deque(sorted(schedule))

    def add(self, at: float, width: int, height: int) -> None:
        self.schedule.append((at, width, height))
        self.schedule = deque(sorted(self.schedule))

    def _pop(self) -> TopologyEvent:
        at, width, height = self.schedule.popleft()
        return TopologyEvent(width=width, height=height, timestamp=at)

    def pending(self) -> list[TopologyEvent]:
        events = []
        while self.schedule and self.schedule[0][0] <= self.clock.now:
            events.append(self._pop())
        return events

    def wait(self, timeout: float) -> TopologyEvent | None:
        if self.schedule and self.schedule[0][0] <= self.clock.now + timeout:
            self.clock.now = max(self.clock.now, self.schedule[0][0])
            return self._pop()
        self.clock.now += timeout
        return None


@dataclass
class FakeWindow:
    title: str | None
    geometry: Geometry
    flags: list[int] = field(default_factory=list)
    fail_geometry: bool = False
    fail_state: bool = False
    fail_send: bool = False


class FakeBackend:
    """In-memory window manager recording every request it receives."""

    def __init__(self):
        self.windows: dict[int, FakeWindow] = {}
        self.calls: list[tuple] = []
        self.activations: list[int] = []
        self.list_calls = 0
        self.fail_list = False
        self.title_failures: set[int] = set()

    def add(self, handle: int, title: str | None, geometry: Geometry | None = None,
            flags=(), **kwargs) -> FakeWindow:
        window = FakeWindow(title=title, geometry=geometry or Geometry(0, 0, 800, 600),
                            flags=list(flags), **kwargs)
        self.windows[handle] = window
        return window

    def _window(self, handle: int) -> FakeWindow:
        try:
            return self.windows[handle]
        except KeyError:
            raise TransientWindowError(handle, "BadWindow") from None

    def intern(self, name: str) -> int:
        return ATOMS[name]

    def client_windows(self) -> list[int]:
        self.list_calls += 1
        if self.fail_list:
            raise TransientWindowError(1, "_NET_CLIENT_LIST is not set")
        return list(self.windows)

    def title(self, handle: int) -> str:
        window = self._window(handle)
        if window.title is None or handle in self.title_failures:
            raise TransientWindowError(handle, "_NET_WM_NAME is not set")
        return window.title

    def geometry(self, handle: int) -> Geometry:
        window = self._window(handle)
        if window.fail_geometry:
            raise TransientWindowError(handle, "cannot read geometry")
        return window.geometry

    def wm_state(self, handle: int) -> tuple[int, ...]:
        window = self._window(handle)
        if window.fail_state:
            raise TransientWindowError(handle, "cannot read _NET_WM_STATE")
        return tuple(window.flags)

    def _check_send(self, handle: int) -> FakeWindow:
        window = self._window(handle)
        if window.fail_send:
            raise SendFailure(handle, "failed to send")
        return window

    def set_wm_state(self, handle: int, flags, enable: bool) -> None:
        self.calls.append(("set_wm_state", handle, tuple(flags), enable))
        window = self._check_send(handle)
        if enable:
            for flag in flags:
                if flag not in window.flags:
                    window.flags.append(flag)
        else:
            window.flags = [f for f in window.flags if f not in flags]

    def move_resize(self, handle: int, geometry: Geometry) -> None:
        self.calls.append(("move_resize", handle, geometry))
        self._check_send(handle).geometry = geometry

    def activate(self, handle: int) -> None:
        self.calls.append(("activate", handle))
        self._check_send(handle)
        self.activations.append(handle)

    def sync(self) -> None:
        self.calls.append(("sync",))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def source(clock):
    return FakeEventSource(clock)
