"""Application loop: routes terminal events and actions to components.

Each iteration has two phases:

1. Event phase: wait for the next terminal event, translate it into an
   action (key presses go through the key-sequence resolver) and give the
   raw event to every component.
2. Drain phase: pop actions without blocking until the queue is empty.
   The app handles its own bookkeeping (tick, quit, resize, render) and then
   passes every action to every component. Follow-up actions returned by
   components are queued and processed in the same pass.
"""

import logging
import queue
from dataclasses import dataclass, field
from typing import Callable, Optional

from .action import Action, Error, Quit, Render, Resize, Tick
from .client.models import Snapshot
from .components import Component
from .components.home import Home
from .keymap import DEFAULT_KEYBINDINGS, KeySequenceResolver, Mode, build_keymaps
from .poller import DEFAULT_INTERVAL, StatusPoller
from .tui import events
from .tui.terminal import Frame, Rect, Tui, TuiConfig, install_panic_hook

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Tunable behavior of the application."""
    status_reload_rate: float = DEFAULT_INTERVAL
    tui: TuiConfig = field(default_factory=TuiConfig)
    keybindings: dict[Mode, dict[str, Action]] = field(
        default_factory=lambda: {mode: dict(table) for mode, table in DEFAULT_KEYBINDINGS.items()}
    )


class App:
    """Single-threaded orchestrator of the dashboard."""

    def __init__(
        self,
        fetch_status: Callable[[], Snapshot],
        config: Optional[AppConfig] = None,
        components: Optional[list[Component]] = None,
        tui_factory: Callable[[TuiConfig], Tui] = Tui,
    ):
        """Create the app.

        Args:
            fetch_status: Callable returning a fresh snapshot, used by the poller
            config: Application configuration (defaults to AppConfig())
            components: Components to drive (defaults to the job list)
            tui_factory: Builds the terminal session from its config

        Raises:
            KeyParseError: If a key binding is malformed.
        """
        self.config = config or AppConfig()
        self.fetch_status = fetch_status
        self.components: list[Component] = components if components is not None else [Home()]
        self.should_quit = False
        self.mode = Mode.HOME
        self.action_queue: "queue.SimpleQueue[Action]" = queue.SimpleQueue()
        self.resolver = KeySequenceResolver(build_keymaps(self.config.keybindings), self.mode)
        self.poller: Optional[StatusPoller] = None
        self._tui_factory = tui_factory

    def run(self) -> None:
        """Run until a quit action is processed, then restore the terminal."""
        tui = self._tui_factory(self.config.tui)
        install_panic_hook(tui)
        tui.enter()
        try:
            for component in self.components:
                component.register_action_handler(self.action_queue)
            area = tui.size()
            for component in self.components:
                component.init(area)

            self.poller = StatusPoller(
                self.fetch_status,
                self.action_queue,
                interval=self.config.status_reload_rate,
            )
            self.poller.start()

            while True:
                self.handle_events(tui)
                self.handle_actions(tui)
                if self.should_quit:
                    tui.stop()
                    break
        finally:
            tui.exit()

    # =========================================================================
    # Event phase
    # =========================================================================

    def translate_event(self, event: events.Event) -> Optional[Action]:
        """Map a terminal event to the action it triggers, if any."""
        if isinstance(event, events.Quit):
            return Quit()
        if isinstance(event, events.Tick):
            return Tick()
        if isinstance(event, events.Render):
            return Render()
        if isinstance(event, events.Resize):
            return Resize(event.width, event.height)
        if isinstance(event, events.Key):
            return self.resolver.resolve(event.key)
        return None

    def handle_events(self, tui: Tui) -> None:
        event = tui.next_event()
        action = self.translate_event(event)
        if action is not None:
            self.action_queue.put(action)

        for component in self.components:
            follow_up = component.handle_events(event)
            if follow_up is not None:
                self.action_queue.put(follow_up)

    # =========================================================================
    # Drain phase
    # =========================================================================

    def handle_actions(self, tui: Tui) -> None:
        while True:
            try:
                action = self.action_queue.get_nowait()
            except queue.Empty:
                break

            if isinstance(action, Tick):
                self.resolver.clear()
            elif isinstance(action, Quit):
                self.should_quit = True
            elif isinstance(action, Resize):
                self.handle_resize(tui, action.width, action.height)
            elif isinstance(action, Render):
                self.render(tui)

            for component in self.components:
                follow_up = component.update(action)
                if follow_up is not None:
                    self.action_queue.put(follow_up)

    def handle_resize(self, tui: Tui, width: int, height: int) -> None:
        tui.resize(Rect(0, 0, width, height))
        self.render(tui)

    def render(self, tui: Tui) -> None:
        """Draw every component into one frame.

        A failing component is reported as an ``Error`` action; the others
        still draw. Errors of the terminal itself propagate.
        """
        def draw(frame: Frame) -> None:
            for component in self.components:
                try:
                    component.draw(frame, frame.area)
                except Exception as e:
                    logger.exception("Component %s failed to draw", type(component).__name__)
                    self.action_queue.put(Error(f"Failed to draw: {e}"))

        tui.draw(draw)
