"""View components driven by the application loop.

See home.py for the job list.
"""

import queue
from abc import ABC, abstractmethod
from typing import Optional

from ..action import Action
from ..keys import KeyEvent
from ..tui import events
from ..tui.terminal import Frame, Rect


class Component(ABC):
    """Interface the app uses to treat every screen the same way.

    Components receive every action through :meth:`update` and may return a
    follow-up action, which the app queues in the same drain pass.
    """

    def register_action_handler(self, action_queue: "queue.SimpleQueue[Action]") -> None:
        """Keep the queue for actions produced outside update/handle calls."""
        self.action_queue = action_queue

    def init(self, area: Rect) -> None:
        """Called once with the initial terminal area."""

    def handle_events(self, event: Optional[events.Event]) -> Optional[Action]:
        """Route a raw terminal event to the specific handler."""
        if isinstance(event, events.Key):
            return self.handle_key_event(event.key)
        if isinstance(event, events.Mouse):
            return self.handle_mouse_event(event)
        return None

    def handle_key_event(self, key: KeyEvent) -> Optional[Action]:
        return None

    def handle_mouse_event(self, mouse: events.Mouse) -> Optional[Action]:
        return None

    @abstractmethod
    def update(self, action: Action) -> Optional[Action]:
        """Apply an action to the component state."""

    @abstractmethod
    def draw(self, frame: Frame, area: Rect) -> None:
        """Place the component's renderables into ``frame``."""
