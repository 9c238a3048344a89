"""JSON configuration for sets of named loggers.

A configuration file looks like::

    {
      "loggers": {
        "app": {
          "path": "/var/log/app/app.log",
          "levels": ["debug", "info", "warning", "audit", "error"],
          "level": "info",
          "flags": ["date", "time", "shortfile"],
          "check_interval": 10,
          "max_size": 10000
        },
        "console": {"path": "", "level": 0}
      }
    }

Every key except the logger name is optional.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .core.levels import DEFAULT_LEVELS, resolve_level, validate_levels
from .core.logger import Logger
from .core.rotation import DEFAULT_CHECK_INTERVAL, DEFAULT_MAX_SIZE
from .errors import ConfigurationError
from .registry import LoggerRegistry
from .utils.formatting import DEFAULT_FLAGS, FormatFlags, parse_flags

LOGGER = logging.getLogger(__name__)

_KNOWN_KEYS = {"path", "levels", "level", "flags", "check_interval", "max_size"}


@dataclass
class LoggerConfig:
    """Settings for one named logger."""

    name: str
    path: Optional[Path] = None
    levels: Tuple[str, ...] = DEFAULT_LEVELS
    level: int = 0
    flags: FormatFlags = DEFAULT_FLAGS
    check_interval: int = DEFAULT_CHECK_INTERVAL
    max_size: int = DEFAULT_MAX_SIZE

    @classmethod
    def from_mapping(cls, name: str, payload: Mapping[str, Any]) -> "LoggerConfig":
        if not isinstance(payload, Mapping):
            raise ConfigurationError(f"Logger '{name}' must be configured with an object")
        unknown = sorted(set(payload) - _KNOWN_KEYS)
        if unknown:
            raise ConfigurationError(f"Logger '{name}' has unknown keys: {', '.join(unknown)}")

        raw_path = payload.get("path")
        if raw_path is not None and not isinstance(raw_path, str):
            raise ConfigurationError(f"Logger '{name}': 'path' must be a string")
        levels = validate_levels(payload.get("levels", DEFAULT_LEVELS))
        level = resolve_level(payload.get("level", 0), levels)
        flags = parse_flags(payload["flags"]) if "flags" in payload else DEFAULT_FLAGS

        return cls(
            name=name,
            path=Path(raw_path) if raw_path else None,
            levels=levels,
            level=level,
            flags=flags,
            check_interval=_positive_int(name, "check_interval", payload, DEFAULT_CHECK_INTERVAL),
            max_size=_positive_int(name, "max_size", payload, DEFAULT_MAX_SIZE),
        )

    def build(self, registry: LoggerRegistry) -> Logger:
        return registry.new(
            self.name,
            self.path,
            self.levels,
            self.level,
            self.flags,
            self.check_interval,
            self.max_size,
        )


def _positive_int(name: str, key: str, payload: Mapping[str, Any], default: int) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"Logger '{name}': '{key}' must be a positive integer, got {value!r}")
    return value


def load_config(config_path: Path) -> List[LoggerConfig]:
    """Read logger settings from a JSON file, in document order."""

    config_path = Path(config_path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read config file {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {config_path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("loggers"), dict):
        raise ConfigurationError(f"Config file {config_path} must contain a 'loggers' object")

    configs = [LoggerConfig.from_mapping(name, payload) for name, payload in raw["loggers"].items()]
    LOGGER.debug("Loaded %d logger definitions from %s", len(configs), config_path)
    return configs


def configure_registry(registry: LoggerRegistry, configs: Iterable[LoggerConfig]) -> LoggerRegistry:
    for config in configs:
        config.build(registry)
    return registry


__all__ = [
    "LoggerConfig",
    "configure_registry",
    "load_config",
]
