"""Line rendering for rotalog output.

A line is ``"<label>: <prefix><message>\\n"`` where the prefix carries the
metadata selected by :class:`FormatFlags`::

    info: 2024/05/01 13:04:05.123456 app.py:42: service started
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from enum import IntFlag
from typing import Iterable, Optional, Tuple, Union

from ..errors import ConfigurationError

Location = Tuple[str, int]


class FormatFlags(IntFlag):
    """Selects which metadata precedes each message."""

    NONE = 0
    DATE = 1
    TIME = 2
    MICROSECONDS = 4
    LONGFILE = 8
    SHORTFILE = 16
    UTC = 32
    ALIGN_LEVEL = 64


DEFAULT_FLAGS = (
    FormatFlags.UTC
    | FormatFlags.DATE
    | FormatFlags.TIME
    | FormatFlags.MICROSECONDS
    | FormatFlags.SHORTFILE
)

_FILE_FLAGS = FormatFlags.LONGFILE | FormatFlags.SHORTFILE


def parse_flags(value: Union[int, str, Iterable[str], None]) -> FormatFlags:
    """Build :class:`FormatFlags` from an int, a comma list, or flag names.

    ``"default"`` selects :data:`DEFAULT_FLAGS`; ``"none"`` or an empty
    value clears every flag.
    """

    if value is None:
        return FormatFlags.NONE
    if isinstance(value, bool):
        raise ConfigurationError(f"flags must be an integer or flag names, got {value!r}")
    if isinstance(value, int):
        if value < 0 or value & ~int(sum(FormatFlags)):
            raise ConfigurationError(f"Unknown format flag bits in {value}")
        return FormatFlags(value)
    if not isinstance(value, (str, list, tuple)):
        raise ConfigurationError(f"flags must be an integer or flag names, got {value!r}")
    names = value.split(",") if isinstance(value, str) else list(value)

    flags = FormatFlags.NONE
    for raw in names:
        if not isinstance(raw, str):
            raise ConfigurationError(f"Format flag names must be strings, got {raw!r}")
        name = raw.strip().upper()
        if not name:
            continue
        if name == "DEFAULT":
            flags |= DEFAULT_FLAGS
            continue
        try:
            flags |= FormatFlags[name]
        except KeyError as exc:
            raise ConfigurationError(f"Unknown format flag '{raw.strip()}'") from exc
    return flags


def caller_location(stacklevel: int = 1) -> Location:
    """Return ``(filename, lineno)`` of the frame ``stacklevel`` levels up.

    ``stacklevel=1`` names the caller of the function that called this one.
    """

    frame = sys._getframe(stacklevel + 1)
    return frame.f_code.co_filename, frame.f_lineno


def render_prefix(
    flags: FormatFlags,
    when: Optional[datetime] = None,
    location: Optional[Location] = None,
) -> str:
    parts = []
    if flags & (FormatFlags.DATE | FormatFlags.TIME | FormatFlags.MICROSECONDS):
        if when is None:
            when = datetime.now(timezone.utc) if flags & FormatFlags.UTC else datetime.now()
        elif flags & FormatFlags.UTC:
            when = when.astimezone(timezone.utc)
        if flags & FormatFlags.DATE:
            parts.append(when.strftime("%Y/%m/%d "))
        if flags & (FormatFlags.TIME | FormatFlags.MICROSECONDS):
            stamp = when.strftime("%H:%M:%S")
            if flags & FormatFlags.MICROSECONDS:
                stamp += f".{when.microsecond:06d}"
            parts.append(stamp + " ")
    if flags & _FILE_FLAGS:
        filename, lineno = location or ("???", 0)
        if flags & FormatFlags.SHORTFILE:
            filename = os.path.basename(filename)
        parts.append(f"{filename}:{lineno}: ")
    return "".join(parts)


def render_line(
    label: str,
    message: str,
    flags: FormatFlags = FormatFlags.NONE,
    *,
    width: int = 0,
    when: Optional[datetime] = None,
    location: Optional[Location] = None,
) -> str:
    """Compose one output line, terminating it with a newline if needed."""

    if flags & FormatFlags.ALIGN_LEVEL:
        head = f"{label}:".ljust(width + 2)
    else:
        head = f"{label}: "
    line = head + render_prefix(flags, when, location) + message
    if not line.endswith("\n"):
        line += "\n"
    return line


__all__ = [
    "DEFAULT_FLAGS",
    "FormatFlags",
    "Location",
    "caller_location",
    "parse_flags",
    "render_line",
    "render_prefix",
]
