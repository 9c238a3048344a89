"""Command line interface for appending messages to a rotated log."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from .config import LoggerConfig, load_config
from .core.levels import DEFAULT_LEVELS, resolve_level, validate_levels
from .core.logger import Logger
from .core.rotation import DEFAULT_CHECK_INTERVAL, DEFAULT_MAX_SIZE
from .errors import ConfigurationError
from .registry import LoggerRegistry
from .utils.formatting import DEFAULT_FLAGS, parse_flags

LOGGER = logging.getLogger(__name__)

CLI_LOGGER_NAME = "cli"


def _config_from_args(args: argparse.Namespace) -> LoggerConfig:
    if args.config:
        configs = {config.name: config for config in load_config(Path(args.config))}
        name = args.name or next(iter(configs), None)
        if name not in configs:
            raise ConfigurationError(f"Logger '{name}' is not defined in {args.config}")
        return configs[name]

    levels = validate_levels(args.levels.split(",")) if args.levels else DEFAULT_LEVELS
    return LoggerConfig(
        name=args.name or CLI_LOGGER_NAME,
        path=Path(args.file) if args.file else None,
        levels=levels,
        level=resolve_level(args.threshold, levels),
        flags=parse_flags(args.flags) if args.flags is not None else DEFAULT_FLAGS,
        check_interval=args.check_interval,
        max_size=args.max_size,
    )


def build_logger(registry: LoggerRegistry, config: LoggerConfig) -> Logger:
    return config.build(registry)


def _messages(args: argparse.Namespace) -> Iterable[str]:
    if args.messages:
        return args.messages
    return (line.rstrip("\n") for line in sys.stdin)


def _positive(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Leveled logging with two-file rotation")
    parser.add_argument("messages", nargs="*", help="Messages to log; read from stdin when omitted")
    parser.add_argument("--file", default="", help="Log file path; rotates between PATH.0 and PATH.1")
    parser.add_argument("--levels", help="Comma separated labels in ascending severity")
    parser.add_argument("--threshold", default="0", help="Lowest level written (label or index)")
    parser.add_argument("--severity", default=None, help="Level of the logged messages (default: threshold)")
    parser.add_argument("--check-interval", type=_positive, default=DEFAULT_CHECK_INTERVAL)
    parser.add_argument("--max-size", type=_positive, default=DEFAULT_MAX_SIZE)
    parser.add_argument("--flags", default=None, help="Comma separated format flags, e.g. date,time,shortfile")
    parser.add_argument("--config", help="JSON file describing named loggers")
    parser.add_argument("--name", help="Logger name to use from --config")
    parser.add_argument("--verbose", action="store_true", help="Show rotalog diagnostics")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    with LoggerRegistry() as registry:
        try:
            config = _config_from_args(args)
            logger = build_logger(registry, config)
            severity = (
                resolve_level(args.severity, logger.levels)
                if args.severity is not None
                else logger.level
            )
        except ConfigurationError as exc:
            print(f"rotalog: {exc}", file=sys.stderr)
            return 2

        LOGGER.debug("Logger '%s' writing to %s", logger.name, logger.active_path or "stdout")
        for message in _messages(args):
            logger.emit(severity, message)

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
