"""Adaptive job table with an optional scrollbar.

Columns are chosen from the data on every render:

- Id, Status, Command, Path, Start and End are always shown
- Prio only if some job has a non-zero priority
- Enqueue At only if some stashed job has a scheduled enqueue time
- Deps only if some job depends on another
- Label only if some job carries a label

Short columns shrink to fit their content, time columns have the fixed
width of the time format, and Command/Path share what remains.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Sequence

from rich.cells import cell_len
from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from ..client.models import (
    DependencyFailed,
    Done,
    Errored,
    Failed,
    FailedToSpawn,
    Job,
    JobStatus,
    Killed,
    Queued,
    Running,
    Stashed,
    Success,
    status_name,
)
from ..tui.terminal import Rect

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
TIME_WIDTH = len("YYYY-MM-DD HH:MM:SS")
MIN_FLEX_WIDTH = 8
SCROLLBAR_WIDTH = 2
HIGHLIGHT_STYLE = "on black"
TRACK_SYMBOL = "║"
THUMB_SYMBOL = "█"


class Column(Enum):
    """Table columns in display order; the value is the header text."""
    ID = "Id"
    STATUS = "Status"
    PRIORITY = "Prio"
    ENQUEUE_AT = "Enqueue At"
    DEPENDENCIES = "Deps"
    LABEL = "Label"
    COMMAND = "Command"
    PATH = "Path"
    START = "Start"
    END = "End"


FIT_COLUMNS = (Column.ID, Column.STATUS, Column.PRIORITY, Column.DEPENDENCIES, Column.LABEL)
TIME_COLUMNS = (Column.ENQUEUE_AT, Column.START, Column.END)


@dataclass
class TableState:
    """Selected row and index of the first visible row."""
    selected: Optional[int] = None
    offset: int = 0


@dataclass
class ScrollbarState:
    content_length: int = 0
    position: int = 0


@dataclass
class JobTableState:
    """Persistent view state of the job table between renders."""
    table: TableState = field(default_factory=TableState)
    scrollbar: ScrollbarState = field(default_factory=ScrollbarState)


# =========================================================================
# Cell formatting
# =========================================================================


def format_time(value: Optional[datetime]) -> str:
    """Format a timestamp in local time; absent timestamps become empty."""
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(TIME_FORMAT)


def status_text(status: JobStatus) -> str:
    if isinstance(status, Done):
        result = status.result
        if isinstance(result, Success):
            return "Success"
        if isinstance(result, Failed):
            return f"Failed ({result.code})"
        if isinstance(result, FailedToSpawn):
            return "Failed to spawn"
        if isinstance(result, Killed):
            return "Killed"
        if isinstance(result, Errored):
            return "Errored"
        if isinstance(result, DependencyFailed):
            return "Dependency failed"
    return status_name(status)


def status_style(status: JobStatus) -> str:
    """Rich style for a status; always bold."""
    if isinstance(status, (Stashed, Queued)):
        return "bold yellow"
    if isinstance(status, Running):
        return "bold green"
    if isinstance(status, Done):
        return "bold green" if isinstance(status.result, Success) else "bold red"
    # Locked and Paused
    return "bold"


def dependencies_text(dependencies: Iterable[int]) -> str:
    return ", ".join(str(dep) for dep in dependencies)


def _enqueue_at(job: Job) -> Optional[datetime]:
    if isinstance(job.status, Stashed):
        return job.status.enqueue_at
    return None


def first_line(value: str) -> str:
    """Rows are one line high; multi-line values show their first line."""
    lines = value.splitlines()
    return lines[0] if lines else ""


def cell_text(job: Job, column: Column) -> str:
    """Plain text of one cell, always a single line."""
    if column is Column.ID:
        return str(job.id)
    if column is Column.STATUS:
        return status_text(job.status)
    if column is Column.PRIORITY:
        return str(job.priority)
    if column is Column.ENQUEUE_AT:
        return format_time(_enqueue_at(job))
    if column is Column.DEPENDENCIES:
        return dependencies_text(job.dependencies)
    if column is Column.LABEL:
        return first_line(job.label or "")
    if column is Column.COMMAND:
        return first_line(job.command)
    if column is Column.PATH:
        return first_line(job.path)
    if column is Column.START:
        return format_time(job.start)
    return format_time(job.end)


def cell(job: Job, column: Column) -> Text:
    if column is Column.STATUS:
        return Text(status_text(job.status), style=status_style(job.status))
    return Text(cell_text(job, column))


# =========================================================================
# Column selection and sizing
# =========================================================================


def select_columns(jobs: Sequence[Job]) -> list[Column]:
    """Columns to show for the given jobs, in display order."""
    has_priority = any(job.priority != 0 for job in jobs)
    has_enqueue_at = any(_enqueue_at(job) is not None for job in jobs)
    has_dependencies = any(job.dependencies for job in jobs)
    has_label = any(job.label is not None for job in jobs)

    optional = {
        Column.PRIORITY: has_priority,
        Column.ENQUEUE_AT: has_enqueue_at,
        Column.DEPENDENCIES: has_dependencies,
        Column.LABEL: has_label,
    }
    return [column for column in Column if optional.get(column, True)]


def column_widths(columns: Sequence[Column], jobs: Sequence[Job]) -> dict[Column, Optional[int]]:
    """Fixed width per column; ``None`` marks a column that fills leftover space."""
    widths: dict[Column, Optional[int]] = {}
    for column in columns:
        if column in FIT_COLUMNS:
            widths[column] = max(
                [cell_len(column.value)] + [cell_len(cell_text(job, column)) for job in jobs]
            )
        elif column in TIME_COLUMNS:
            widths[column] = TIME_WIDTH
        else:
            widths[column] = None
    return widths


# =========================================================================
# Scrolling
# =========================================================================


def needs_scrollbar(row_count: int, height: int) -> bool:
    """Whether the rows overflow the area (one line goes to the header)."""
    return max(0, height - 1) < row_count


def visible_offset(state: TableState, row_count: int, visible_rows: int) -> int:
    """First visible row, keeping the selected row inside the window."""
    if row_count == 0 or visible_rows <= 0:
        return 0
    offset = min(state.offset, max(0, row_count - visible_rows))
    selected = state.selected
    if selected is not None:
        selected = min(selected, row_count - 1)
        if selected < offset:
            offset = selected
        elif selected >= offset + visible_rows:
            offset = selected - visible_rows + 1
    return offset


def scrollbar_thumb(content_length: int, position: int, track_length: int) -> tuple[int, int]:
    """Start and length of the thumb on a track of ``track_length`` cells."""
    if track_length <= 0 or content_length <= 0:
        return 0, 0
    max_position = content_length - 1
    start_position = min(max(position, 0), max_position)
    max_viewport_position = max_position + track_length
    end_position = start_position + track_length

    thumb_start = start_position * track_length / max_viewport_position
    thumb_end = end_position * track_length / max_viewport_position
    start = round(min(max(thumb_start, 0), track_length - 1))
    end = round(min(max(thumb_end, 0), track_length))
    return start, max(1, end - start)


def scrollbar_text(state: ScrollbarState, track_length: int) -> Text:
    """Vertical scrollbar column, preceded by a blank line beside the header."""
    start, length = scrollbar_thumb(state.content_length, state.position, track_length)
    pad = " " * (SCROLLBAR_WIDTH - 1)
    lines = [pad + " "]
    for index in range(track_length):
        symbol = THUMB_SYMBOL if start <= index < start + length else TRACK_SYMBOL
        lines.append(pad + symbol)
    return Text("\n".join(lines), no_wrap=True)


# =========================================================================
# Widget
# =========================================================================


class JobTable:
    """Stateless table widget; selection and scrolling live in ``JobTableState``."""

    def __init__(self, jobs: Sequence[Job]):
        self.jobs = list(jobs)

    def build_table(self, state: TableState, visible_rows: int) -> Table:
        columns = select_columns(self.jobs)
        widths = column_widths(columns, self.jobs)

        table = Table(
            box=None,
            show_header=True,
            show_edge=False,
            pad_edge=False,
            padding=(0, 1),
            expand=True,
        )
        for column in columns:
            header = Text(column.value, style="bold")
            width = widths[column]
            if width is None:
                table.add_column(header, min_width=MIN_FLEX_WIDTH, ratio=1, no_wrap=True, overflow="ellipsis")
            else:
                table.add_column(header, width=width, no_wrap=True, overflow="ellipsis")

        state.offset = visible_offset(state, len(self.jobs), visible_rows)
        window = self.jobs[state.offset:state.offset + max(0, visible_rows)]
        for index, job in enumerate(window, start=state.offset):
            style = HIGHLIGHT_STYLE if index == state.selected else None
            table.add_row(*(cell(job, column) for column in columns), style=style)
        return table

    def render(self, area: Rect, state: JobTableState) -> RenderableType:
        """Build the renderable for ``area``, updating ``state`` in place."""
        state.scrollbar.content_length = len(self.jobs)
        visible_rows = max(0, area.height - 1)
        table = self.build_table(state.table, visible_rows)

        if not needs_scrollbar(len(self.jobs), area.height):
            return table

        layout = Table.grid(expand=True)
        layout.add_column(ratio=1)
        layout.add_column(width=SCROLLBAR_WIDTH, no_wrap=True)
        layout.add_row(table, scrollbar_text(state.scrollbar, visible_rows))
        return layout
