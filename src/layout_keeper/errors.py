"""Error types for layout-keeper."""


class LayoutKeeperError(Exception):
    """Base class for all layout-keeper errors."""


class TransientWindowError(LayoutKeeperError):
    """A single window's title, geometry or state could not be read."""

    def __init__(self, handle: int, message: str):
        super().__init__(f"window 0x{handle:x}: {message}")
        self.handle = handle


class SendFailure(LayoutKeeperError):
    """A geometry, state or activation request could not be delivered."""

    def __init__(self, handle: int, message: str):
        super().__init__(f"window 0x{handle:x}: {message}")
        self.handle = handle


class ProtocolSetupError(LayoutKeeperError):
    """The display connection or its required extensions are unusable."""
