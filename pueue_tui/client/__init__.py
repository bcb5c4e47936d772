"""Access to the daemon: configuration, status client and data model."""

from .client import Client
from .models import Job, Snapshot
from .settings import Settings

__all__ = ["Client", "Job", "Snapshot", "Settings"]
