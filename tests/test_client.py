"""Tests for the status client."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pueue_tui.client.client import Client
from pueue_tui.client.settings import Settings
from pueue_tui.errors import ClientError

STATUS = {
    "tasks": {"0": {"id": 0, "command": "ls", "path": "/", "status": "Queued"}},
    "groups": {},
}


def completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> MagicMock:
    proc = MagicMock()
    proc.stdout = stdout
    proc.stderr = stderr
    proc.returncode = returncode
    return proc


@pytest.fixture
def client() -> Client:
    return Client(Settings(path=Path("/etc/pueue.yml"), profile="work"), executable="pueue")


class TestClientStatus:
    """Tests for Client.status."""

    def test_command_line(self, client):
        with patch("subprocess.run", return_value=completed(json.dumps(STATUS))) as run:
            client.status()

        cmd = run.call_args.args[0]
        assert cmd == ["pueue", "--config", "/etc/pueue.yml", "--profile", "work", "status", "--json"]

    def test_parses_snapshot(self, client):
        with patch("subprocess.run", return_value=completed(json.dumps(STATUS))):
            snapshot = client.status()

        assert [job.command for job in snapshot.jobs] == ["ls"]

    def test_nonzero_exit(self, client):
        proc = completed(returncode=1, stderr="Failed to connect to the daemon")
        with patch("subprocess.run", return_value=proc):
            with pytest.raises(ClientError, match="Failed to connect"):
                client.status()

    def test_nonzero_exit_names_command(self, client):
        proc = completed(returncode=2, stderr="connection refused")
        with patch("subprocess.run", return_value=proc):
            with pytest.raises(ClientError) as exc:
                client.status()

        assert str(exc.value) == "pueue status failed: connection refused"

    def test_timeout(self, client):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("pueue", 5)):
            with pytest.raises(ClientError):
                client.status()

    def test_invalid_json(self, client):
        with patch("subprocess.run", return_value=completed("not json")):
            with pytest.raises(ClientError, match="Invalid status response"):
                client.status()

    def test_malformed_task_fields(self, client):
        bad = {"tasks": {"0": {"id": "zero", "status": "Queued"}}, "groups": {}}
        with patch("subprocess.run", return_value=completed(json.dumps(bad))):
            with pytest.raises(ClientError, match="Invalid status response"):
                client.status()


class TestClientConnect:
    """Tests for Client.connect."""

    def test_missing_executable(self):
        settings = Settings(path=Path("/etc/pueue.yml"))
        with patch("shutil.which", return_value=None):
            with pytest.raises(ClientError, match="executable"):
                Client.connect(settings, executable="pueue")

    def test_checks_status(self):
        settings = Settings(path=Path("/etc/pueue.yml"))
        with patch("shutil.which", return_value="/usr/bin/pueue"), \
                patch("subprocess.run", return_value=completed(json.dumps(STATUS))) as run:
            client = Client.connect(settings, executable="pueue")

        assert isinstance(client, Client)
        run.assert_called_once()
