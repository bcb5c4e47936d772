"""Exception hierarchy for pueue-tui."""


class PueueTuiError(Exception):
    """Base class for errors reported to the user at startup."""


class ConfigError(PueueTuiError):
    """Raised when no usable configuration can be found."""


class ClientError(PueueTuiError):
    """Raised when the daemon status cannot be fetched."""


class TerminalError(PueueTuiError):
    """Raised when the terminal cannot be put into interactive mode."""
