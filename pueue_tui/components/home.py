"""Job list screen."""

from collections import Counter
from typing import Optional

from ..action import Action, Error, UpdateStatus
from ..client.models import Job, status_name
from ..keys import KeyCode, KeyEvent, KeyModifiers
from ..tui import events
from ..tui.terminal import Frame, Rect
from ..widgets.job_table import JobTable, JobTableState
from ..widgets.status_bar import StatusBar
from . import Component


class Home(Component):
    """Scrollable table of all jobs with a status bar below it.

    Up/Down move the selection and wrap around at both ends. The scrollbar
    position always equals the selected row.
    """

    def __init__(self) -> None:
        self.action_queue = None
        self.state = JobTableState()
        self.jobs: list[Job] = []
        self.last_error: Optional[str] = None

    # =========================================================================
    # Input
    # =========================================================================

    def handle_key_event(self, key: KeyEvent) -> Optional[Action]:
        if key.modifiers != KeyModifiers.NONE:
            return None
        if key.code is KeyCode.DOWN:
            self.next_row()
        elif key.code is KeyCode.UP:
            self.prev_row()
        return None

    def handle_mouse_event(self, mouse: events.Mouse) -> Optional[Action]:
        if mouse.kind == "scroll_down":
            self.next_row()
        elif mouse.kind == "scroll_up":
            self.prev_row()
        return None

    @property
    def selected(self) -> Optional[int]:
        return self.state.table.selected

    def select(self, index: Optional[int]) -> None:
        self.state.table.selected = index
        self.state.scrollbar.position = index if index is not None else 0

    def next_row(self) -> None:
        if not self.jobs:
            self.select(None)
            return
        i = self.selected
        if i is None or i >= len(self.jobs) - 1:
            self.select(0)
        else:
            self.select(i + 1)

    def prev_row(self) -> None:
        if not self.jobs:
            self.select(None)
            return
        i = self.selected
        if i is None:
            self.select(0)
        elif i == 0 or i > len(self.jobs) - 1:
            self.select(len(self.jobs) - 1)
        else:
            self.select(i - 1)

    # =========================================================================
    # State updates
    # =========================================================================

    def update(self, action: Action) -> Optional[Action]:
        if isinstance(action, UpdateStatus):
            self.set_jobs(action.snapshot.jobs)
            self.last_error = None
        elif isinstance(action, Error):
            self.last_error = action.message
        return None

    def set_jobs(self, jobs: list[Job]) -> None:
        """Replace the cached job list, keeping the selection in range."""
        self.jobs = list(jobs)
        self.state.scrollbar.content_length = len(self.jobs)

        if not self.jobs:
            self.select(None)
        elif self.selected is None:
            self.select(0)
        elif self.selected >= len(self.jobs):
            self.select(len(self.jobs) - 1)

    def summary(self) -> str:
        """Short overview such as ``3 jobs: 1 Running, 2 Queued``."""
        if not self.jobs:
            return "No jobs"
        counts = Counter(status_name(job.status) for job in self.jobs)
        parts = ", ".join(f"{count} {name}" for name, count in counts.items())
        noun = "job" if len(self.jobs) == 1 else "jobs"
        return f"{len(self.jobs)} {noun}: {parts}"

    # =========================================================================
    # Rendering
    # =========================================================================

    def draw(self, frame: Frame, area: Rect) -> None:
        table_area = Rect(area.x, area.y, area.width, max(0, area.height - 1))
        frame.render_widget(JobTable(self.jobs).render(table_area, self.state), table_area)

        if area.height > 0:
            bar_area = Rect(area.x, area.y + table_area.height, area.width, 1)
            if self.last_error is not None:
                bar = StatusBar(self.last_error, left_style="red")
            else:
                bar = StatusBar(self.summary())
            frame.render_widget(bar.render(area.width), bar_area)
