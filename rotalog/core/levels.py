"""Severity labels and the threshold filter."""
from __future__ import annotations

from enum import IntEnum
from typing import Sequence, Tuple, Union

from ..errors import ConfigurationError


class Level(IntEnum):
    """Indexes into :data:`DEFAULT_LEVELS`."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    AUDIT = 3
    ERROR = 4


DEFAULT_LEVELS: Tuple[str, ...] = ("debug", "info", "warning", "audit", "error")


def should_emit(severity: int, threshold: int) -> bool:
    """Return ``True`` when a message at ``severity`` passes ``threshold``."""

    return severity >= threshold


def in_range(severity: int, levels: Sequence[str]) -> bool:
    return 0 <= severity < len(levels)


def validate_levels(levels: Sequence[str]) -> Tuple[str, ...]:
    """Normalise a label sequence, rejecting empty or non-string entries."""

    if not isinstance(levels, (list, tuple)):
        raise ConfigurationError(f"levels must be a list of labels, got {levels!r}")
    labels = tuple(levels)
    if not labels:
        raise ConfigurationError("levels must contain at least one label")
    for label in labels:
        if not isinstance(label, str) or not label:
            raise ConfigurationError(f"level labels must be non-empty strings, got {label!r}")
    return labels


def validate_threshold(level: int, levels: Sequence[str]) -> int:
    if isinstance(level, bool) or not isinstance(level, int):
        raise ConfigurationError(f"level must be an integer index, got {level!r}")
    if not in_range(level, levels):
        raise ConfigurationError(
            f"input level was outside range, level:{level}, len(levels)-1:{len(levels) - 1}"
        )
    return int(level)


def resolve_level(value: Union[int, str], levels: Sequence[str]) -> int:
    """Translate a label name or index into a validated index.

    Numeric strings are accepted so command line values such as ``"2"``
    resolve the same way as ``2``.
    """

    if isinstance(value, str):
        if value in levels:
            return list(levels).index(value)
        lowered = value.lower()
        for index, label in enumerate(levels):
            if label.lower() == lowered:
                return index
        if value.strip().lstrip("-").isdigit():
            return validate_threshold(int(value), levels)
        raise ConfigurationError(f"Unknown level '{value}', expected one of {', '.join(levels)}")
    return validate_threshold(value, levels)


def label_width(levels: Sequence[str]) -> int:
    """Width of the longest label, used to align prefixes."""

    return max((len(label) for label in levels), default=0)


__all__ = [
    "DEFAULT_LEVELS",
    "Level",
    "in_range",
    "label_width",
    "resolve_level",
    "should_emit",
    "validate_levels",
    "validate_threshold",
]
