"""Terminal session, frame composition and input events."""

from .terminal import Frame, Rect, Tui, TuiConfig, install_panic_hook

__all__ = ["Frame", "Rect", "Tui", "TuiConfig", "install_panic_hook"]
