"""Logging setup.

The terminal belongs to the dashboard while it runs, so log records go to a
file and only when one is requested through ``PUEUE_TUI_LOG``.
"""

import logging
import os
from typing import Optional

LOG_FILE_ENV_VAR = "PUEUE_TUI_LOG"
LOG_LEVEL_ENV_VAR = "PUEUE_TUI_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(environ: Optional[dict[str, str]] = None) -> Optional[logging.Handler]:
    """Attach a handler to the package logger and return it.

    Raises:
        OSError: If the requested log file cannot be opened.
    """
    environ = os.environ if environ is None else environ
    package_logger = logging.getLogger("pueue_tui")

    path = environ.get(LOG_FILE_ENV_VAR)
    if not path:
        handler: logging.Handler = logging.NullHandler()
        package_logger.addHandler(handler)
        return handler

    level_name = environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
