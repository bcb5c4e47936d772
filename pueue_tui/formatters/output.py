"""Rich console output for messages printed before or after the dashboard runs."""

from rich.console import Console
from rich.text import Text

from .symbols import SymbolsFormatter


class OutputFormatter:
    """Rich console plus symbol formatting.

    The console handles no_color mode, so styled Text is printed plain when
    colors are disabled.
    """

    def __init__(self, no_color: bool = False, stderr: bool = True):
        """Initialize the output formatter.

        Args:
            no_color: If True, disable all colors and styling in output
            stderr: If True, print to stderr instead of stdout
        """
        self._no_color = no_color
        self._console = Console(
            no_color=no_color,
            force_terminal=None,
            highlight=False,
            stderr=stderr,
        )
        self._symbols = SymbolsFormatter(no_color=no_color)

    def print_error(self, message: str) -> None:
        line = Text()
        line.append(f"{self._symbols.Cross} ", style="red")
        line.append("Error: ", style="bold red")
        line.append(message)
        self._console.print(line, highlight=False)

    def print_warning(self, message: str) -> None:
        line = Text()
        line.append(f"{self._symbols.Warning} ", style="yellow")
        line.append("Warning: ", style="bold yellow")
        line.append(message)
        self._console.print(line, highlight=False)
