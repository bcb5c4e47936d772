"""Client fetching the daemon status through the ``pueue`` executable."""

import json
import logging
import os
import shutil
import subprocess
import threading
from typing import Optional

from ..errors import ClientError
from .models import ModelError, Snapshot
from .settings import Settings

logger = logging.getLogger(__name__)

PUEUE_BIN_ENV_VAR = "PUEUE_BIN"
DEFAULT_TIMEOUT = 5.0


class Client:
    """Read-only access to the daemon.

    All calls are serialized by an internal lock, so one client can be
    shared between threads.
    """

    def __init__(self, settings: Settings, executable: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT):
        self.settings = settings
        self.executable = executable or os.environ.get(PUEUE_BIN_ENV_VAR, "pueue")
        self.timeout = timeout
        self._lock = threading.Lock()

    @classmethod
    def connect(cls, settings: Settings, executable: Optional[str] = None) -> "Client":
        """Create a client and verify the daemon answers.

        Raises:
            ClientError: If the executable is missing or the daemon is unreachable.
        """
        client = cls(settings, executable)
        if shutil.which(client.executable) is None:
            raise ClientError(f"Couldn't find the '{client.executable}' executable in PATH")
        client.status()
        return client

    def _command(self) -> list[str]:
        cmd = [self.executable, "--config", str(self.settings.path)]
        if self.settings.profile:
            cmd.extend(["--profile", self.settings.profile])
        cmd.extend(["status", "--json"])
        return cmd

    def status(self) -> Snapshot:
        """Fetch a full snapshot of all jobs.

        Raises:
            ClientError: On any failure to run the command or read its output.
        """
        cmd = self._command()
        logger.debug("Fetching status: %s", " ".join(cmd))
        with self._lock:
            try:
                proc = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                raise ClientError(f"Failed to run {cmd[0]}: {e}") from e

        if proc.returncode != 0:
            detail = proc.stderr.strip() or proc.stdout.strip() or f"exit code {proc.returncode}"
            raise ClientError(f"{cmd[0]} status failed: {detail}")

        try:
            return Snapshot.from_json(json.loads(proc.stdout))
        except (json.JSONDecodeError, ModelError) as e:
            raise ClientError(f"Invalid status response: {e}") from e
