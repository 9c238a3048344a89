"""Two-file rotation: slot naming, startup selection, and the size-check trigger."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from ..errors import ConfigurationError, RotationError

LOGGER = logging.getLogger(__name__)

ROTATIONS = 2
DEFAULT_CHECK_INTERVAL = 10
DEFAULT_MAX_SIZE = 10_000

PathLike = Union[str, Path]


def slot_path(file_path: PathLike, slot: int) -> Path:
    """Return ``<file_path>.<slot>``."""

    return Path(f"{file_path}.{slot}")


def next_slot(slot: int) -> int:
    return (slot + 1) % ROTATIONS


def remove_slot(file_path: PathLike, slot: int) -> None:
    """Delete a slot file; a file that is already gone counts as success."""

    target = slot_path(file_path, slot)
    try:
        target.unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        raise RotationError(f"removing log file {target}, error:{exc}") from exc
    LOGGER.debug("Removed rotation file %s", target)


def select_initial_slot(file_path: PathLike, max_size: int) -> int:
    """Pick the slot a freshly constructed logger should append to.

    Slots are scanned in order and the first one that is missing, or smaller
    than ``max_size``, wins. When every slot is full the oldest data is
    dropped: ``<file_path>.0`` is deleted and slot 0 is returned. A failed
    deletion raises :class:`RotationError`.
    """

    for slot in range(ROTATIONS):
        candidate = slot_path(file_path, slot)
        try:
            size = candidate.stat().st_size
        except FileNotFoundError:
            return slot
        except OSError as exc:
            LOGGER.warning("Unable to stat %s (%s); using slot %d", candidate, exc, slot)
            return slot
        if size < max_size:
            return slot

    LOGGER.info("All rotation files for %s are full; clearing slot 0", file_path)
    remove_slot(file_path, 0)
    return 0


class RotationTrigger:
    """Amortises size checks to one per ``interval`` calls.

    Probing the file size costs a system call, so a larger interval makes
    writes cheaper while letting the file overshoot ``max_size`` by up to
    ``interval - 1`` lines.
    """

    def __init__(self, interval: int) -> None:
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise ConfigurationError(f"check_interval must be a positive integer, got {interval!r}")
        self.interval = interval
        self.writes_since_check = 0

    def tick(self) -> bool:
        """Count one call; return ``True`` when a size check is due."""

        self.writes_since_check += 1
        if self.writes_since_check >= self.interval:
            self.writes_since_check = 0
            return True
        return False

    def reset(self) -> None:
        self.writes_since_check = 0


__all__ = [
    "DEFAULT_CHECK_INTERVAL",
    "DEFAULT_MAX_SIZE",
    "ROTATIONS",
    "RotationTrigger",
    "next_slot",
    "remove_slot",
    "select_initial_slot",
    "slot_path",
]
