"""Leveled, multi-instance logging with two-file size rotation."""

from .config import LoggerConfig, configure_registry, load_config
from .core.levels import DEFAULT_LEVELS, Level
from .core.logger import Logger
from .core.rotation import DEFAULT_CHECK_INTERVAL, DEFAULT_MAX_SIZE
from .errors import (
    ConfigurationError,
    LevelRangeError,
    LoggerNotFoundError,
    RotalogError,
    RotationError,
    ShutdownError,
)
from .registry import LoggerRegistry
from .utils.formatting import DEFAULT_FLAGS, FormatFlags

__all__ = [
    "ConfigurationError",
    "DEFAULT_CHECK_INTERVAL",
    "DEFAULT_FLAGS",
    "DEFAULT_LEVELS",
    "DEFAULT_MAX_SIZE",
    "FormatFlags",
    "Level",
    "LevelRangeError",
    "Logger",
    "LoggerConfig",
    "LoggerNotFoundError",
    "LoggerRegistry",
    "RotalogError",
    "RotationError",
    "ShutdownError",
    "configure_registry",
    "load_config",
]
