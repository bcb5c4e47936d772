"""Tests for parsing the daemon status JSON."""

from datetime import datetime, timedelta, timezone

import pytest

from pueue_tui.client.models import (
    DependencyFailed,
    Done,
    Failed,
    FailedToSpawn,
    Killed,
    Locked,
    ModelError,
    Queued,
    Running,
    Snapshot,
    Stashed,
    Success,
    parse_result,
    parse_status,
    parse_timestamp,
)


def task(task_id, status, **kwargs):
    data = {
        "id": task_id,
        "command": "sleep 10",
        "path": "/home/user",
        "label": None,
        "priority": 0,
        "dependencies": [],
        "group": "default",
        "status": status,
    }
    data.update(kwargs)
    return data


class TestParseTimestamp:
    """Tests for RFC 3339 timestamps."""

    def test_nanoseconds_truncated(self):
        value = parse_timestamp("2024-03-01T12:30:45.123456789+01:00")
        assert value == datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=timezone(timedelta(hours=1)))

    def test_zulu(self):
        value = parse_timestamp("2024-03-01T12:30:45Z")
        assert value.tzinfo == timezone.utc

    def test_absent(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_invalid(self):
        with pytest.raises(ModelError):
            parse_timestamp("yesterday")


class TestParseStatus:
    """Tests for status and result variants."""

    def test_bare_variant(self):
        assert parse_status("Queued") == Queued()
        assert parse_status("Locked") == Locked()

    def test_variant_with_payload(self):
        status = parse_status({"Running": {"enqueued_at": None, "start": "2024-03-01T12:00:00Z"}})
        assert isinstance(status, Running)
        assert status.start == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)

    def test_stashed_enqueue_at(self):
        status = parse_status({"Stashed": {"enqueue_at": "2024-03-01T12:00:00Z"}})
        assert status == Stashed(enqueue_at=datetime(2024, 3, 1, 12, tzinfo=timezone.utc))
        assert parse_status({"Stashed": {"enqueue_at": None}}) == Stashed()

    def test_done_results(self):
        assert parse_result("Success") == Success()
        assert parse_result({"Failed": 3}) == Failed(3)
        assert parse_result({"FailedToSpawn": "no such file"}) == FailedToSpawn("no such file")
        assert parse_result("DependencyFailed") == DependencyFailed()

    def test_done_with_times(self):
        status = parse_status({
            "Done": {
                "enqueued_at": "2024-03-01T11:00:00Z",
                "start": "2024-03-01T12:00:00Z",
                "end": "2024-03-01T12:05:00Z",
                "result": {"Failed": 1},
            }
        })
        assert isinstance(status, Done)
        assert status.result == Failed(1)
        assert status.end - status.start == timedelta(minutes=5)

    def test_older_daemon_times_on_task(self):
        """Older daemons keep start/end on the task itself."""
        status = parse_status("Running", {"start": "2024-03-01T12:00:00Z"})
        assert status.start == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)

    def test_older_daemon_done_newtype(self):
        """Older daemons wrap the bare result in Done, with times on the task."""
        times = {"start": "2024-03-01T12:00:00Z", "end": "2024-03-01T12:01:00Z"}

        failed = parse_status({"Done": {"Failed": 2}}, times)
        assert failed.result == Failed(2)
        assert failed.end - failed.start == timedelta(minutes=1)

        assert parse_status({"Done": "Success"}, times).result == Success()
        assert parse_status({"Done": "Killed"}).result == Killed()

    def test_done_without_result(self):
        with pytest.raises(ModelError):
            parse_status("Done")

    def test_invalid_exit_code(self):
        with pytest.raises(ModelError):
            parse_result({"Failed": "two"})

    def test_unknown_variant(self):
        with pytest.raises(ModelError):
            parse_status("Exploded")
        with pytest.raises(ModelError):
            parse_result({"A": 1, "B": 2})


class TestSnapshot:
    """Tests for whole-state parsing."""

    def test_from_json(self):
        data = {
            "tasks": {
                "2": task(2, "Queued", priority=5, label="nightly", dependencies=[1]),
                "1": task(1, {"Done": {"start": "2024-03-01T12:00:00Z", "end": "2024-03-01T12:01:00Z", "result": "Success"}}),
            },
            "groups": {"default": {"status": "Running", "parallel_tasks": 1}},
        }
        snapshot = Snapshot.from_json(data)

        assert [job.id for job in snapshot.jobs] == [1, 2]
        first, second = snapshot.jobs
        assert first.start is not None and first.end is not None
        assert second.priority == 5
        assert second.label == "nightly"
        assert second.dependencies == (1,)
        assert "default" in snapshot.groups

    def test_empty_state(self):
        assert Snapshot.from_json({"tasks": {}, "groups": {}}).jobs == []

    def test_older_daemon_failed_job(self):
        data = {
            "tasks": {
                "0": task(
                    0,
                    {"Done": {"Failed": 2}},
                    start="2024-03-01T12:00:00Z",
                    end="2024-03-01T12:01:00Z",
                ),
            },
            "groups": {},
        }
        (job,) = Snapshot.from_json(data).jobs
        assert job.status.result == Failed(code=2)
        assert job.start is not None

    @pytest.mark.parametrize("field, value", [
        ("id", "abc"),
        ("priority", "high"),
        ("dependencies", ["x"]),
        ("dependencies", [None]),
    ])
    def test_malformed_numbers(self, field, value):
        entry = task(1, "Queued")
        entry[field] = value
        with pytest.raises(ModelError):
            Snapshot.from_json({"tasks": {"1": entry}, "groups": {}})

    def test_rejects_non_mapping(self):
        with pytest.raises(ModelError):
            Snapshot.from_json([])
