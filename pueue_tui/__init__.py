"""Terminal dashboard for the jobs of a pueue daemon."""

__version__ = "0.1.0"
