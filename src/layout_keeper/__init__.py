"""layout-keeper - keep X11 window layouts across display topology changes."""

__version__ = "0.1.0"
