"""Command-line interface for pueue-tui."""

import logging
import sys
from typing import Optional

from .app import App
from .cli_builder import build_arg_parser
from .client import Client, Settings
from .errors import PueueTuiError
from .formatters import OutputFormatter
from .keys import KeyParseError
from .log import configure_logging

logger = logging.getLogger(__name__)


class CLI:
    """Command-line interface for pueue-tui."""

    def __init__(self):
        self.parser = build_arg_parser()

    def run(self, argv: Optional[list[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:])

        Returns:
            Exit code
        """
        args = self.parser.parse_args(argv)
        output = OutputFormatter()

        try:
            configure_logging()
        except OSError as e:
            output.print_warning(f"Cannot open log file: {e}")

        try:
            settings = Settings.read(args.config, args.profile)
            logger.info("Using configuration %s", settings.path)
            client = Client.connect(settings)
            app = App(client.status)
            app.run()
        except (PueueTuiError, KeyParseError) as e:
            logger.error("Startup failed: %s", e)
            output.print_error(str(e))
            return 1

        return 0


def main() -> None:
    """Entry point for the pueue-tui command."""
    sys.exit(CLI().run())
