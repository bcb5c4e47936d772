"""Terminal surface and event source.

``Tui`` owns the interactive terminal session: raw input mode, the
alternate screen (through Rich ``Live``), optional mouse and paste capture,
and the threads that feed a single ordered event queue:

- reader: decodes stdin and detects terminal resizes
- tick: fixed-rate logic heartbeat
- render: fixed-rate frame requests
"""

import logging
import os
import queue
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TextIO

from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.text import Text

from ..errors import TerminalError
from . import events
from .events import Event, InputDecoder

# Cross-platform terminal handling
IS_WINDOWS = sys.platform == "win32"

if not IS_WINDOWS:
    import select
    import termios
    import tty

logger = logging.getLogger(__name__)

READ_TIMEOUT = 0.05
DEFAULT_SIZE = (80, 24)

ENABLE_MOUSE = "\x1b[?1000h\x1b[?1002h\x1b[?1006h"
DISABLE_MOUSE = "\x1b[?1006l\x1b[?1002l\x1b[?1000l"
ENABLE_PASTE = "\x1b[?2004h"
DISABLE_PASTE = "\x1b[?2004l"


@dataclass(frozen=True)
class Rect:
    """A rectangular screen area."""
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class TuiConfig:
    """Rates (per second) and capture options of the terminal session."""
    frame_rate: float = 60.0
    tick_rate: float = 4.0
    mouse: bool = True
    paste: bool = False


@dataclass
class Frame:
    """One frame under construction.

    Components place renderables into horizontal bands of the frame area;
    the bands are stacked top to bottom when the frame is shown.
    """
    area: Rect
    regions: list[tuple[RenderableType, Rect]] = field(default_factory=list)

    def render_widget(self, renderable: RenderableType, area: Rect) -> None:
        self.regions.append((renderable, area))

    def compose(self) -> RenderableType:
        """Combine all regions into one renderable filling the frame."""
        if not self.regions:
            return Text("")
        ordered = sorted(self.regions, key=lambda region: region[1].y)
        layout = Layout()
        layout.split_column(
            *(Layout(renderable, size=max(0, rect.height)) for renderable, rect in ordered)
        )
        return layout


def get_terminal_size() -> tuple[int, int]:
    """Get terminal width and height."""
    try:
        size = os.get_terminal_size()
        return (size.columns, size.lines)
    except OSError:
        return DEFAULT_SIZE


class Tui:
    """Interactive terminal session and ordered source of terminal events."""

    def __init__(
        self,
        config: TuiConfig,
        console: Optional[Console] = None,
        stdin: Optional[TextIO] = None,
    ):
        self.config = config
        self.console = console or Console(highlight=False)
        self.stdin = stdin or sys.stdin
        self.events: "queue.Queue[Event]" = queue.Queue()
        width, height = get_terminal_size()
        self.area = Rect(0, 0, width, height)

        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []
        self._old_terminal_settings: Optional[list[Any]] = None
        self._live: Optional[Live] = None
        self._active = False
        self._exit_lock = threading.RLock()

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def enter(self) -> None:
        """Switch to raw mode and the alternate screen and start the event threads.

        Raises:
            TerminalError: If stdin is not an interactive terminal.
        """
        if IS_WINDOWS:
            raise TerminalError("Interactive mode requires a POSIX terminal")

        fd = self.stdin.fileno()
        try:
            self._old_terminal_settings = termios.tcgetattr(fd)
            tty.setraw(fd)
            # Keep output post-processing so Rich's newlines return the carriage.
            attrs = termios.tcgetattr(fd)
            attrs[1] |= termios.OPOST | termios.ONLCR
            termios.tcsetattr(fd, termios.TCSANOW, attrs)
        except (termios.error, ValueError) as e:
            raise TerminalError(f"stdin is not an interactive terminal: {e}") from e

        self._active = True
        self._live = Live(
            Text(""),
            console=self.console,
            screen=True,
            auto_refresh=False,
            transient=False,
            redirect_stdout=False,
            redirect_stderr=False,
        )
        self._live.start()
        if self.config.mouse:
            self._write(ENABLE_MOUSE)
        if self.config.paste:
            self._write(ENABLE_PASTE)
        self.start()

    def start(self) -> None:
        """Start the reader and timer threads."""
        self._stop.clear()
        self._threads = [
            threading.Thread(target=self._read_loop, name="tui-reader", daemon=True),
            threading.Thread(
                target=self._timer_loop,
                args=(self.config.tick_rate, events.Tick),
                name="tui-tick",
                daemon=True,
            ),
            threading.Thread(
                target=self._timer_loop,
                args=(self.config.frame_rate, events.Render),
                name="tui-render",
                daemon=True,
            ),
        ]
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        """Stop producing events."""
        self._stop.set()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current and thread.is_alive():
                thread.join(timeout=1.0)
        self._threads = []

    def exit(self) -> None:
        """Restore the terminal. Safe to call repeatedly and from exception hooks."""
        with self._exit_lock:
            if not self._active:
                return
            self._active = False

            self.stop()
            if self.config.paste:
                self._write(DISABLE_PASTE)
            if self.config.mouse:
                self._write(DISABLE_MOUSE)
            if self._live is not None:
                self._live.stop()
                self._live = None
            self._restore_terminal()

    def _restore_terminal(self) -> None:
        if self._old_terminal_settings is None:
            return
        try:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._old_terminal_settings)
        except (termios.error, ValueError):
            logger.warning("Failed to restore terminal settings")
        self._old_terminal_settings = None

    def _write(self, sequence: str) -> None:
        try:
            self.console.file.write(sequence)
            self.console.file.flush()
        except (OSError, ValueError):
            logger.warning("Failed to write control sequence to terminal")

    # =========================================================================
    # Event source
    # =========================================================================

    def next_event(self) -> Event:
        """Block until the next event is available."""
        return self.events.get()

    def _emit(self, event: Event) -> None:
        if isinstance(event, events.Mouse) and not self.config.mouse:
            return
        if isinstance(event, events.Paste) and not self.config.paste:
            return
        self.events.put(event)

    def _timer_loop(self, rate: float, factory: Callable[[], Event]) -> None:
        interval = 1.0 / rate
        while not self._stop.wait(interval):
            self.events.put(factory())

    def _check_resize(self, last_size: tuple[int, int]) -> tuple[int, int]:
        size = get_terminal_size()
        if size != last_size:
            self.events.put(events.Resize(*size))
        return size

    def _read_loop(self) -> None:
        fd = self.stdin.fileno()
        decoder = InputDecoder()
        last_size = (self.area.width, self.area.height)

        while not self._stop.is_set():
            last_size = self._check_resize(last_size)
            try:
                ready, _, _ = select.select([fd], [], [], READ_TIMEOUT)
                if not ready:
                    for event in decoder.flush():
                        self._emit(event)
                    continue
                data = os.read(fd, 1024)
            except (OSError, ValueError) as e:
                logger.error("Reading terminal input failed: %s", e)
                self.events.put(events.Quit())
                return

            if not data:
                logger.info("Terminal input closed")
                self.events.put(events.Quit())
                return

            for event in decoder.feed(data):
                self._emit(event)

    # =========================================================================
    # Rendering surface
    # =========================================================================

    def size(self) -> Rect:
        width, height = get_terminal_size()
        return Rect(0, 0, width, height)

    def resize(self, area: Rect) -> None:
        self.area = area

    def draw(self, callback: Callable[[Frame], None]) -> None:
        """Build a frame with ``callback`` and show it.

        Raises:
            TerminalError: If the session has not been entered.
        """
        if self._live is None:
            raise TerminalError("Terminal session is not active")
        frame = Frame(self.area)
        callback(frame)
        self._live.update(frame.compose(), refresh=True)


def install_panic_hook(tui: Tui) -> None:
    """Restore the terminal before any uncaught exception is reported.

    Chains to the hooks that were installed before.
    """
    previous_hook = sys.excepthook
    previous_thread_hook = threading.excepthook

    def hook(exc_type, exc_value, exc_traceback):
        tui.exit()
        previous_hook(exc_type, exc_value, exc_traceback)

    def thread_hook(args):
        tui.exit()
        previous_thread_hook(args)

    sys.excepthook = hook
    threading.excepthook = thread_hook
