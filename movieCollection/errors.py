"""
errors
~~~~~~
Exception types shared by every layer.

Store failures are *not* wrapped: ``sqlite3.Error`` reaches the caller as-is.
"""


class ConfigError(EnvironmentError):
    """Settings file missing, unreadable or unusable – fatal at startup."""


class DatabaseConnectionError(RuntimeError):
    """The database could not be reached / opened / created."""


class ValidationError(ValueError):
    """Raised before any store call when user input breaks a rule."""


class PlayerLaunchError(OSError):
    """No default-handler facility available to open a movie file."""
