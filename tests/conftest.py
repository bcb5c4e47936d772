"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from pueue_tui.client.models import Done, Job, Queued, Running, Snapshot, Success


def make_job(job_id: int, status: Any = None, **kwargs: Any) -> Job:
    """Create a Job with sensible defaults for testing."""
    kwargs.setdefault("command", f"echo {job_id}")
    kwargs.setdefault("path", "/tmp")
    return Job(id=job_id, status=status if status is not None else Queued(), **kwargs)


def make_snapshot(jobs: list[Job]) -> Snapshot:
    return Snapshot(tasks={job.id: job for job in jobs})


@pytest.fixture
def three_jobs() -> list[Job]:
    """Queued, Running and successfully Done jobs with ids 1, 2, 3."""
    return [
        make_job(1, Queued()),
        make_job(2, Running()),
        make_job(3, Done(result=Success())),
    ]
