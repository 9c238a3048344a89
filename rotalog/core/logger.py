"""Leveled logger writing to a pair of size-rotated files or to a stream."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, TextIO, Union

from ..errors import ConfigurationError, LevelRangeError, RotationError, ShutdownError
from ..utils.formatting import FormatFlags, caller_location, render_line
from .levels import in_range, label_width, should_emit, validate_levels, validate_threshold
from .rotation import RotationTrigger, next_slot, remove_slot, select_initial_slot, slot_path
from .targets import FileTarget, OutputTarget, StreamTarget

LOGGER = logging.getLogger(__name__)

_LOCATION_FLAGS = FormatFlags.LONGFILE | FormatFlags.SHORTFILE


class Logger:
    """A named, leveled log with two-file size rotation.

    When ``file_path`` is set, output goes to ``<file_path>.0`` or
    ``<file_path>.1``. Every ``check_interval`` calls to :meth:`emit` the
    active file is stat'ed and, once it is larger than ``max_size`` bytes,
    output switches to the other slot after that slot's old content is
    deleted. Calls that are filtered out by the level still count towards
    the interval.

    When ``file_path`` is empty, output goes to ``fallback`` (``sys.stdout``
    when not given) and no rotation happens. A slot file that cannot be
    opened at construction also sends output to ``fallback``; the failure is
    kept in :attr:`last_error` instead of being raised.

    Instances are not thread safe.
    """

    def __init__(
        self,
        name: str,
        file_path: Union[str, Path, None],
        levels: Sequence[str],
        level: int,
        flags: int,
        check_interval: int,
        max_size: int,
        *,
        fallback: Optional[TextIO] = None,
    ) -> None:
        self.name = name
        self.levels = validate_levels(levels)
        self._level = validate_threshold(level, self.levels)
        self.flags = FormatFlags(flags)
        self._trigger = RotationTrigger(check_interval)
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
            raise ConfigurationError(f"max_size must be a positive integer, got {max_size!r}")
        self.max_size = max_size
        self._file_path = Path(file_path) if file_path else None
        self._fallback = fallback
        self.rotation = 0
        self.last_error: Optional[Exception] = None
        self.closed = False
        self._target: Optional[OutputTarget] = None

        if self._file_path is None:
            self._target = StreamTarget(fallback)
        else:
            try:
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ConfigurationError(f"creating log file directory, error:{exc}") from exc
            try:
                self.rotation = select_initial_slot(self._file_path, self.max_size)
            except RotationError as exc:
                self._record(exc)
            self._open_initial()

        self.label_width = label_width(self.levels)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int) -> None:
        self._level = validate_threshold(value, self.levels)

    @property
    def file_path(self) -> Optional[Path]:
        return self._file_path

    @property
    def active_path(self) -> Optional[Path]:
        """Path of the slot file currently written, ``None`` for stream loggers."""

        if self._file_path is None:
            return None
        return slot_path(self._file_path, self.rotation)

    @property
    def check_interval(self) -> int:
        return self._trigger.interval

    @property
    def writes_since_check(self) -> int:
        return self._trigger.writes_since_check

    @property
    def target(self) -> Optional[OutputTarget]:
        return self._target

    # ------------------------------------------------------------------
    # Emitting
    # ------------------------------------------------------------------
    def emit(self, severity: int, message: str, *, stacklevel: int = 1) -> bool:
        """Write ``message`` at ``severity`` and drive the rotation check.

        Returns ``True`` when a line was written. An out-of-range severity is
        recorded in :attr:`last_error` and nothing else happens. ``stacklevel``
        selects the frame reported by the file flags, 1 being the caller.
        """

        if self.closed:
            return False

        if isinstance(severity, bool) or not isinstance(severity, int) or not in_range(
            severity, self.levels
        ):
            error = LevelRangeError(severity, len(self.levels))
            self.last_error = error
            LOGGER.error("Logger '%s': %s", self.name, error)
            return False

        written = False
        if should_emit(severity, self._level):
            location = caller_location(stacklevel) if self.flags & _LOCATION_FLAGS else None
            line = render_line(
                self.levels[severity],
                str(message),
                self.flags,
                width=self.label_width,
                location=location,
            )
            written = self._write(line)

        if self._file_path is not None and self._trigger.tick():
            try:
                self.check_size_and_rotate()
            except RotationError as exc:
                self._record(exc)
        return written

    def log(self, severity: int, msg: str, *args: object, stacklevel: int = 1) -> bool:
        """Printf-style emit: ``msg % args`` when arguments are given.

        A format that does not match ``args`` is recorded in
        :attr:`last_error` and the raw ``msg`` is written followed by
        ``repr(args)``.
        """

        message = msg
        if args:
            try:
                message = msg % args
            except (TypeError, ValueError) as exc:
                self._record(exc)
                message = f"{msg} {args!r}"
        return self.emit(severity, message, stacklevel=stacklevel + 1)

    def println(self, severity: int, *values: object, stacklevel: int = 1) -> bool:
        """Emit the space-joined ``str()`` of ``values``."""

        message = " ".join(str(value) for value in values)
        return self.emit(severity, message, stacklevel=stacklevel + 1)

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------
    def check_size_and_rotate(self) -> bool:
        """Rotate to the other slot if the active file exceeds ``max_size``.

        Returns ``True`` when a rotation happened. Raises
        :class:`RotationError` when the active file cannot be stat'ed or the
        next slot cannot be cleared or opened; in that case the logger keeps
        writing to its current target.
        """

        if self._file_path is None or self.closed:
            return False

        self._trigger.reset()
        active = slot_path(self._file_path, self.rotation)
        try:
            size = active.stat().st_size
        except OSError as exc:
            raise RotationError(f"checking log file size {active}, error:{exc}") from exc
        if size <= self.max_size:
            return False

        previous = self.rotation
        self.rotation = next_slot(previous)
        try:
            remove_slot(self._file_path, self.rotation)
            new_target = self._open_slot()
        except RotationError:
            self.rotation = previous
            raise

        old_target, self._target = self._target, new_target
        if old_target is not None:
            self._close_target(old_target)
        LOGGER.info(
            "Logger '%s' rotated %s (%d bytes) -> %s",
            self.name,
            active,
            size,
            slot_path(self._file_path, self.rotation),
        )
        return True

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------
    def shutdown(self) -> None:
        """Close the log file. Safe to call more than once.

        Raises :class:`ShutdownError` if the file fails to close; the logger
        is considered closed regardless.
        """

        if self.closed:
            return
        self.closed = True
        target, self._target = self._target, None
        if target is None or not target.owns_handle:
            return
        try:
            target.close()
        except OSError as exc:
            raise ShutdownError(f"closing log file, error:{exc}") from exc

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return (
            f"Logger(name={self.name!r}, level={self.levels[self._level]!r}, "
            f"target={self._target!r}, closed={self.closed})"
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _open_slot(self) -> FileTarget:
        path = slot_path(self._file_path, self.rotation)
        try:
            return FileTarget(path)
        except OSError as exc:
            raise RotationError(f"opening log file {path}, error:{exc}") from exc

    def _open_initial(self) -> None:
        try:
            self._target = self._open_slot()
        except RotationError as exc:
            self._target = StreamTarget(self._fallback)
            self._record(exc)

    def _write(self, line: str) -> bool:
        if self._target is None:
            return False
        try:
            self._target.write(line)
        except (OSError, ValueError) as exc:
            self._record(exc)
            return False
        return True

    def _close_target(self, target: OutputTarget) -> None:
        if not target.owns_handle:
            return
        try:
            target.close()
        except OSError as exc:
            self._record(ShutdownError(f"closing log file, error:{exc}"))

    def _record(self, error: Exception) -> None:
        self.last_error = error
        LOGGER.warning("Logger '%s' degraded: %s", self.name, error)


__all__ = ["Logger"]
