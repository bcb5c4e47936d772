"""One-line status bar: message on the left, program name and version on the right."""

from rich.cells import cell_len, set_cell_size
from rich.table import Table
from rich.text import Text

from .. import __version__

PROGRAM_NAME = "pueue-tui"
MIN_SPACE = 2
ELLIPSIS = "..."


class StatusBar:
    def __init__(self, left: str, left_style: str = ""):
        self.left = " ".join(left.splitlines())
        self.left_style = left_style

    def fit_left(self, width: int) -> str:
        """Left text, cut with an ellipsis when it would collide with the right side."""
        right_len = cell_len(PROGRAM_NAME) + 2 + cell_len(__version__)
        if cell_len(self.left) + right_len + MIN_SPACE < width:
            return self.left

        available = max(0, width - (right_len + MIN_SPACE))
        if available <= len(ELLIPSIS):
            return ELLIPSIS
        return set_cell_size(self.left, available - len(ELLIPSIS)) + ELLIPSIS

    def render(self, width: int) -> Table:
        right = Text()
        right.append(PROGRAM_NAME, style="bold")
        right.append(f" v{__version__}")

        bar = Table.grid(expand=True)
        bar.add_column(ratio=1, no_wrap=True, overflow="crop")
        bar.add_column(justify="right", no_wrap=True)
        bar.add_row(Text(self.fit_left(width), style=self.left_style), right)
        return bar
