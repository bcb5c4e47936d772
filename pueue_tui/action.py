"""Actions flowing through the application's action queue.

Actions are produced from terminal events, timers, the status poller and
components, and are consumed by the orchestrator and every component.
"""

from dataclasses import dataclass
from typing import Union

from .client.models import Snapshot


@dataclass(frozen=True)
class Tick:
    """Logic heartbeat."""


@dataclass(frozen=True)
class Render:
    """Request to draw a frame."""


@dataclass(frozen=True)
class Resize:
    """Terminal was resized."""
    width: int
    height: int


@dataclass(frozen=True)
class Quit:
    """Leave the main loop."""


@dataclass(frozen=True)
class Error:
    """Human-readable, non-fatal error to display."""
    message: str


@dataclass(frozen=True)
class UpdateStatus:
    """A fresh status snapshot from the daemon."""
    snapshot: Snapshot


Action = Union[Tick, Render, Resize, Quit, Error, UpdateStatus]
