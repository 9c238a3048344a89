"""Exception hierarchy shared by the rotalog package."""
from __future__ import annotations


class RotalogError(RuntimeError):
    """Base class for every error raised by rotalog."""


class ConfigurationError(RotalogError, ValueError):
    """Raised when a logger cannot be constructed from the supplied settings."""


class LevelRangeError(RotalogError, ValueError):
    """Describes a severity index that falls outside the logger's label set."""

    def __init__(self, level: int, levels_count: int) -> None:
        super().__init__(
            f"input level was outside range, level:{level}, len(levels)-1:{levels_count - 1}"
        )
        self.level = level
        self.levels_count = levels_count


class RotationError(RotalogError, OSError):
    """Raised when the rotation path fails to stat, delete, or open a slot file."""


class ShutdownError(RotalogError):
    """Raised when a log file could not be closed cleanly."""


class LoggerNotFoundError(RotalogError, KeyError):
    """Raised when a registry lookup names a logger that was never created."""

    def __str__(self) -> str:
        return f"No logger registered under '{self.args[0]}'" if self.args else "Unknown logger"


__all__ = [
    "ConfigurationError",
    "LevelRangeError",
    "LoggerNotFoundError",
    "RotalogError",
    "RotationError",
    "ShutdownError",
]
