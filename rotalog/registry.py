"""Named collection of loggers owned by the application."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, TextIO, Union

from .core.levels import DEFAULT_LEVELS
from .core.logger import Logger
from .core.rotation import DEFAULT_CHECK_INTERVAL, DEFAULT_MAX_SIZE
from .errors import LoggerNotFoundError, ShutdownError
from .utils.formatting import DEFAULT_FLAGS

LOGGER = logging.getLogger(__name__)


class LoggerRegistry:
    """Maps names to :class:`Logger` instances.

    ``main`` typically configures the loggers once and hands the registry to
    the code that logs, which looks loggers up by name. Creating a logger
    under a name that is taken shuts the previous instance down first, which
    is also how the level of a running log is changed. Used as a context
    manager, the registry shuts every logger down on exit.
    """

    def __init__(self, fallback: Optional[TextIO] = None) -> None:
        self._loggers: Dict[str, Logger] = {}
        self._fallback = fallback

    def new(
        self,
        name: str,
        file_path: Union[str, Path, None],
        levels: Sequence[str] = DEFAULT_LEVELS,
        level: int = 0,
        flags: int = DEFAULT_FLAGS,
        check_interval: int = DEFAULT_CHECK_INTERVAL,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> Logger:
        """Create and register a logger, replacing any logger named ``name``."""

        self.discard(name)
        logger = Logger(
            name,
            file_path,
            levels,
            level,
            flags,
            check_interval,
            max_size,
            fallback=self._fallback,
        )
        self._loggers[name] = logger
        if logger.last_error is not None:
            LOGGER.warning("Logger '%s' started degraded: %s", name, logger.last_error)
        return logger

    def get(self, name: str) -> Logger:
        try:
            return self._loggers[name]
        except KeyError as exc:
            raise LoggerNotFoundError(name) from exc

    def find(self, name: str) -> Optional[Logger]:
        return self._loggers.get(name)

    def discard(self, name: str) -> None:
        """Shut down and forget ``name``; unknown names are ignored."""

        logger = self._loggers.pop(name, None)
        if logger is None:
            return
        try:
            logger.shutdown()
        except ShutdownError as exc:
            LOGGER.warning("Replaced logger '%s' did not close cleanly: %s", name, exc)

    def shutdown_all(self) -> None:
        """Shut down every logger and empty the registry.

        Every logger is attempted even when some fail; afterwards a single
        :class:`ShutdownError` listing all failures is raised, chained to the
        last one.
        """

        failures: List[ShutdownError] = []
        for name, logger in list(self._loggers.items()):
            try:
                logger.shutdown()
            except ShutdownError as exc:
                LOGGER.warning("Logger '%s' did not close cleanly: %s", name, exc)
                failures.append(exc)
        self._loggers.clear()
        if failures:
            details = "; ".join(str(exc) for exc in failures)
            raise ShutdownError(f"{len(failures)} logger(s) failed to shut down: {details}") from failures[-1]

    def names(self) -> List[str]:
        return list(self._loggers)

    def __contains__(self, name: object) -> bool:
        return name in self._loggers

    def __getitem__(self, name: str) -> Logger:
        return self.get(name)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._loggers))

    def __len__(self) -> int:
        return len(self._loggers)

    def __enter__(self) -> "LoggerRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.shutdown_all()
            return
        # Keep the in-flight exception; shutdown failures are only logged.
        try:
            self.shutdown_all()
        except ShutdownError as shutdown_exc:
            LOGGER.error("Shutdown during exception handling failed: %s", shutdown_exc)


__all__ = ["LoggerRegistry"]
