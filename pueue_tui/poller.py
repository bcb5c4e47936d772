"""Background status polling."""

import logging
import queue
import threading
import time
from typing import Callable, Optional

from .action import Action, Error, UpdateStatus
from .client.models import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0


class StatusPoller:
    """Detached thread publishing the daemon status on a fixed interval.

    Every iteration fetches the status, queues either ``UpdateStatus`` or
    ``Error`` and then sleeps, whatever the outcome. The thread never stops
    on its own; it is a daemon thread and ends with the process.
    """

    def __init__(
        self,
        fetch: Callable[[], Snapshot],
        action_queue: "queue.SimpleQueue[Action]",
        interval: float = DEFAULT_INTERVAL,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.fetch = fetch
        self.action_queue = action_queue
        self.interval = interval
        self._sleep = sleep or time.sleep
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> Action:
        """Fetch once and queue the resulting action."""
        try:
            action: Action = UpdateStatus(self.fetch())
        except Exception as e:
            logger.warning("Status fetch failed: %s", e)
            action = Error(f"Failed to fetch status: {e}")
        self.action_queue.put(action)
        return action

    def run(self) -> None:
        while True:
            self.run_once()
            self._sleep(self.interval)

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self.run, name="status-poller", daemon=True)
        self._thread.start()
        return self._thread
