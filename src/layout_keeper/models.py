"""Data types shared by capture, restore and the daemon loop."""

from dataclasses import dataclass, field

# X window id. Referenced, never owned.
WindowHandle = int

# Ordered _NET_WM_STATE atoms, exactly as read from the window.
StateFlags = tuple[int, ...]


@dataclass(frozen=True)
class Geometry:
    """Window position and size in root window coordinates."""
    x: int
    y: int
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}{self.x:+d}{self.y:+d}"


@dataclass(frozen=True)
class WindowSnapshot:
    """One window as it looked while the original topology was present."""
    handle: WindowHandle
    title: str
    geometry: Geometry
    flags: StateFlags = ()


@dataclass(frozen=True)
class SnapshotSet:
    """Every captured window for the current present period."""
    windows: tuple[WindowSnapshot, ...]
    captured_at: float

    def __len__(self) -> int:
        return len(self.windows)

    def __iter__(self):
        return iter(self.windows)


@dataclass(frozen=True)
class TopologyEvent:
    """A screen change notification and the time it arrived."""
    width: int
    height: int
    timestamp: float

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass
class WindowResult:
    """Outcome of one per-window operation."""
    handle: WindowHandle
    title: str | None = None
    ok: bool = True
    error: str | None = None


@dataclass
class BatchOutcome:
    """Outcome of a capture, restore or escalation pass."""
    results: list[WindowResult] = field(default_factory=list)
    skipped: int = 0

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    def succeed(self, handle: WindowHandle, title: str | None = None) -> None:
        self.results.append(WindowResult(handle=handle, title=title))

    def fail(self, handle: WindowHandle, error: Exception, title: str | None = None) -> None:
        self.results.append(WindowResult(handle=handle, title=title, ok=False, error=str(error)))

    def summary(self) -> str:
        return f"{self.successful} ok, {self.failed} failed, {self.skipped} skipped"
