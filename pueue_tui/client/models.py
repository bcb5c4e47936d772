"""Read-only model of the daemon state consumed by the dashboard.

The daemon reports its state as JSON. Enum-like values are encoded either as
a bare variant name (``"Queued"``) or as a single-key object carrying the
variant payload (``{"Done": {"result": "Success", ...}}``).
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union


class ModelError(ValueError):
    """Raised when the daemon state cannot be interpreted."""


# =========================================================================
# Job results
# =========================================================================


@dataclass(frozen=True)
class Success:
    pass


@dataclass(frozen=True)
class Failed:
    code: int


@dataclass(frozen=True)
class FailedToSpawn:
    message: str = ""


@dataclass(frozen=True)
class Killed:
    pass


@dataclass(frozen=True)
class Errored:
    pass


@dataclass(frozen=True)
class DependencyFailed:
    pass


JobResult = Union[Success, Failed, FailedToSpawn, Killed, Errored, DependencyFailed]


# =========================================================================
# Job statuses
# =========================================================================


@dataclass(frozen=True)
class Locked:
    pass


@dataclass(frozen=True)
class Stashed:
    enqueue_at: Optional[datetime] = None


@dataclass(frozen=True)
class Queued:
    pass


@dataclass(frozen=True)
class Running:
    start: Optional[datetime] = None


@dataclass(frozen=True)
class Paused:
    start: Optional[datetime] = None


@dataclass(frozen=True)
class Done:
    result: JobResult = field(default_factory=Success)
    start: Optional[datetime] = None
    end: Optional[datetime] = None


JobStatus = Union[Locked, Stashed, Queued, Running, Paused, Done]


def status_name(status: JobStatus) -> str:
    """Return the variant tag of a status, e.g. ``"Queued"``."""
    return type(status).__name__


@dataclass(frozen=True)
class Job:
    """A single job known to the daemon."""
    id: int
    status: JobStatus
    command: str = ""
    path: str = ""
    priority: int = 0
    dependencies: tuple[int, ...] = ()
    label: Optional[str] = None
    group: str = "default"
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class Snapshot:
    """Full point-in-time copy of the daemon state."""
    tasks: dict[int, Job] = field(default_factory=dict)
    groups: dict[str, Any] = field(default_factory=dict)

    @property
    def jobs(self) -> list[Job]:
        """Jobs ordered by id."""
        return [self.tasks[job_id] for job_id in sorted(self.tasks)]

    @classmethod
    def from_json(cls, data: Any) -> "Snapshot":
        """Build a snapshot from the decoded ``status --json`` output.

        Raises:
            ModelError: If the payload does not look like a daemon state.
        """
        if not isinstance(data, dict) or not isinstance(data.get("tasks", {}), dict):
            raise ModelError("Unexpected status payload")

        tasks = {}
        for raw_task in data.get("tasks", {}).values():
            job = parse_job(raw_task)
            tasks[job.id] = job
        return cls(tasks=tasks, groups=dict(data.get("groups") or {}))


# =========================================================================
# Parsing
# =========================================================================

_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; nanosecond precision is truncated."""
    if not value:
        return None
    text = _FRACTION.sub(r"\1", value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ModelError(f"Invalid timestamp {value!r}") from e


def _split_variant(value: Any) -> tuple[str, Any]:
    """Split ``"Name"`` or ``{"Name": payload}`` into (name, payload)."""
    if isinstance(value, str):
        return value, None
    if isinstance(value, dict) and len(value) == 1:
        name, payload = next(iter(value.items()))
        return name, payload
    raise ModelError(f"Unexpected variant {value!r}")


def parse_result(value: Any) -> JobResult:
    name, payload = _split_variant(value)
    if name == "Success":
        return Success()
    if name == "Failed":
        try:
            return Failed(int(payload) if payload is not None else 1)
        except (TypeError, ValueError) as e:
            raise ModelError(f"Invalid exit code {payload!r}") from e
    if name == "FailedToSpawn":
        return FailedToSpawn(str(payload or ""))
    if name == "Killed":
        return Killed()
    if name == "Errored":
        return Errored()
    if name == "DependencyFailed":
        return DependencyFailed()
    raise ModelError(f"Unknown job result {name!r}")


def parse_status(value: Any, task: Optional[dict[str, Any]] = None) -> JobStatus:
    """Parse a job status, taking start/end from the task for older daemons."""
    name, raw_payload = _split_variant(value)
    payload = raw_payload if isinstance(raw_payload, dict) else {}
    task = task or {}

    start = parse_timestamp(payload.get("start") or task.get("start"))
    end = parse_timestamp(payload.get("end") or task.get("end"))

    if name == "Locked":
        return Locked()
    if name == "Stashed":
        enqueue_at = payload.get("enqueue_at", task.get("enqueue_at"))
        return Stashed(enqueue_at=parse_timestamp(enqueue_at))
    if name == "Queued":
        return Queued()
    if name == "Running":
        return Running(start=start)
    if name == "Paused":
        return Paused(start=start)
    if name == "Done":
        if "result" in payload:
            result = payload["result"]
        elif raw_payload is not None:
            # Older daemons: {"Done": "Success"} or {"Done": {"Failed": 2}}
            result = raw_payload
        elif "result" in task:
            result = task["result"]
        else:
            raise ModelError("Done status without a result")
        return Done(result=parse_result(result), start=start, end=end)
    raise ModelError(f"Unknown job status {name!r}")


def parse_job(task: Any) -> Job:
    if not isinstance(task, dict) or "id" not in task:
        raise ModelError(f"Unexpected task entry {task!r}")

    status = parse_status(task.get("status", "Queued"), task)
    start = getattr(status, "start", None)
    end = getattr(status, "end", None)

    try:
        job_id = int(task["id"])
        priority = int(task.get("priority") or 0)
        dependencies = tuple(int(dep) for dep in task.get("dependencies") or ())
    except (TypeError, ValueError) as e:
        raise ModelError(f"Invalid task entry {task.get('id')!r}: {e}") from e

    return Job(
        id=job_id,
        status=status,
        command=task.get("command") or task.get("original_command") or "",
        path=str(task.get("path") or ""),
        priority=priority,
        dependencies=dependencies,
        label=task.get("label"),
        group=task.get("group") or "default",
        start=start,
        end=end,
    )
