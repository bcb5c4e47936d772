"""Renderable building blocks used by components."""

from .job_table import JobTable, JobTableState
from .status_bar import StatusBar

__all__ = ["JobTable", "JobTableState", "StatusBar"]
