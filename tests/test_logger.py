"""Behavioural tests for the Logger lifecycle and emit path."""

from __future__ import annotations

import inspect
import io
import logging
from pathlib import Path

import pytest

from rotalog.core.levels import DEFAULT_LEVELS, Level
from rotalog.core.logger import Logger
from rotalog.core.rotation import slot_path
from rotalog.core.targets import FileTarget, StreamTarget
from rotalog.errors import ConfigurationError, LevelRangeError, RotationError, ShutdownError
from rotalog.registry import LoggerRegistry
from rotalog.utils.formatting import DEFAULT_FLAGS, FormatFlags

MESSAGES = [
    (Level.DEBUG, "this is a debug print"),
    (Level.INFO, "this is a info print"),
    (Level.WARNING, "this is a warning print"),
    (Level.AUDIT, "this is a audit print"),
    (Level.ERROR, "this is a error print"),
]


def _emit_all(logger: Logger) -> None:
    for level, message in MESSAGES:
        logger.println(level, message)


def test_stream_logger_writes_to_stdout(capsys) -> None:
    logger = Logger("stream", "", DEFAULT_LEVELS, Level.DEBUG, FormatFlags.NONE, 10, 1000)
    assert isinstance(logger.target, StreamTarget)
    assert logger.active_path is None

    logger.println(Level.DEBUG, "Sending data to defaultOutput")
    assert capsys.readouterr().out == "debug: Sending data to defaultOutput\n"
    assert logger.writes_since_check == 0
    logger.shutdown()


def test_stream_logger_uses_given_fallback() -> None:
    buffer = io.StringIO()
    logger = Logger("buffer", None, DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000, fallback=buffer)
    logger.log(Level.INFO, "%d widgets from %s", 3, "stock")
    logger.shutdown()
    assert buffer.getvalue() == "info: 3 widgets from stock\n"
    assert not buffer.closed


def test_info_threshold_scenario(tmp_path: Path) -> None:
    log_path = tmp_path / "log.txt"
    logger = Logger("scenario", log_path, DEFAULT_LEVELS, Level.INFO, FormatFlags.NONE, 10, 10_000)
    _emit_all(logger)
    logger.shutdown()

    lines = slot_path(log_path, 0).read_text("utf-8").splitlines()
    assert [line.split(":", 1)[0] for line in lines] == ["info", "warning", "audit", "error"]


@pytest.mark.parametrize("threshold", range(len(DEFAULT_LEVELS)))
def test_threshold_selects_label_subset(tmp_path: Path, threshold: int) -> None:
    log_path = tmp_path / "log.txt"
    registry = LoggerRegistry()
    logger = registry.new("levels", log_path, DEFAULT_LEVELS, threshold, DEFAULT_FLAGS, 10, 10_000)
    _emit_all(logger)
    registry.shutdown_all()

    lines = slot_path(log_path, 0).read_text("utf-8").splitlines()
    assert [line.split(":", 1)[0] for line in lines] == list(DEFAULT_LEVELS[threshold:])


def test_recreating_logger_changes_level(tmp_path: Path) -> None:
    log_path = tmp_path / "log.txt"
    with LoggerRegistry() as registry:
        registry.new("app", log_path, DEFAULT_LEVELS, Level.DEBUG, FormatFlags.NONE, 10, 10_000)
        _emit_all(registry.get("app"))
        registry.new("app", log_path, DEFAULT_LEVELS, Level.WARNING, FormatFlags.NONE, 10, 10_000)
        _emit_all(registry.get("app"))

    labels = [line.split(":", 1)[0] for line in slot_path(log_path, 0).read_text("utf-8").splitlines()]
    assert labels == list(DEFAULT_LEVELS) + ["warning", "audit", "error"]


def test_level_can_be_assigned_at_runtime(capsys) -> None:
    logger = Logger("runtime", "", DEFAULT_LEVELS, Level.ERROR, FormatFlags.NONE, 10, 1000)
    logger.emit(Level.INFO, "hidden")
    logger.level = Level.INFO
    logger.emit(Level.INFO, "shown")
    assert capsys.readouterr().out == "info: shown\n"
    with pytest.raises(ConfigurationError):
        logger.level = 9


def test_existing_small_file_is_appended(tmp_path: Path) -> None:
    log_path = tmp_path / "log.txt"
    slot_path(log_path, 0).write_text("info: from an earlier run\n", encoding="utf-8")

    logger = Logger("append", log_path, DEFAULT_LEVELS, Level.DEBUG, FormatFlags.NONE, 10, 10_000)
    logger.emit(Level.INFO, "from this run")
    logger.shutdown()

    assert slot_path(log_path, 0).read_text("utf-8") == "info: from an earlier run\ninfo: from this run\n"


def test_parent_directory_is_created(tmp_path: Path) -> None:
    log_path = tmp_path / "nested" / "deeper" / "log.txt"
    logger = Logger("nested", log_path, DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000)
    logger.emit(Level.DEBUG, "created")
    logger.shutdown()
    assert slot_path(log_path, 0).read_text("utf-8") == "debug: created\n"


def test_directory_creation_failure_is_configuration_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="creating log file directory"):
        Logger("blocked", blocker / "log.txt", DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000)


@pytest.mark.parametrize(
    "level, check_interval, max_size",
    [(5, 10, 1000), (-1, 10, 1000), (0, 0, 1000), (0, 10, 0)],
)
def test_invalid_construction_parameters(tmp_path: Path, level, check_interval, max_size) -> None:
    with pytest.raises(ConfigurationError):
        Logger("bad", tmp_path / "log.txt", DEFAULT_LEVELS, level, 0, check_interval, max_size)


def test_open_failure_falls_back_to_stream(tmp_path: Path, caplog) -> None:
    log_path = tmp_path / "log.txt"
    slot_path(log_path, 0).mkdir()
    buffer = io.StringIO()

    with caplog.at_level(logging.WARNING, logger="rotalog.core.logger"):
        logger = Logger(
            "fallback", log_path, DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 10**9, fallback=buffer
        )
    assert isinstance(logger.last_error, RotationError)
    assert isinstance(logger.target, StreamTarget)
    assert "degraded" in caplog.text

    assert logger.emit(Level.WARNING, "still delivered") is True
    assert buffer.getvalue() == "warning: still delivered\n"
    logger.shutdown()


def test_out_of_range_severity_is_reported_not_raised(tmp_path: Path, caplog) -> None:
    log_path = tmp_path / "log.txt"
    logger = Logger("range", log_path, DEFAULT_LEVELS, 0, FormatFlags.NONE, 1, 10)

    with caplog.at_level(logging.ERROR, logger="rotalog.core.logger"):
        assert logger.emit(len(DEFAULT_LEVELS), "nope") is False
        assert logger.emit(-1, "nope") is False
    assert isinstance(logger.last_error, LevelRangeError)
    assert "outside range" in caplog.text
    assert slot_path(log_path, 0).read_text("utf-8") == ""
    assert logger.writes_since_check == 0
    logger.shutdown()


def test_shortfile_reports_call_site(tmp_path: Path) -> None:
    log_path = tmp_path / "log.txt"
    logger = Logger("lines", log_path, DEFAULT_LEVELS, 0, FormatFlags.SHORTFILE, 10, 1000)

    emit_line = inspect.currentframe().f_lineno + 1
    logger.emit(Level.DEBUG, "this is the emit call")
    log_line = inspect.currentframe().f_lineno + 1
    logger.log(Level.DEBUG, "this is the %s call", "log")
    println_line = inspect.currentframe().f_lineno + 1
    logger.println(Level.DEBUG, "this is the println call")
    logger.shutdown()

    content = slot_path(log_path, 0).read_text("utf-8")
    assert f"test_logger.py:{emit_line}: this is the emit call" in content
    assert f"test_logger.py:{log_line}: this is the log call" in content
    assert f"test_logger.py:{println_line}: this is the println call" in content


def test_two_loggers_are_independent(tmp_path: Path) -> None:
    first_path = tmp_path / "one" / "log1.txt"
    second_path = tmp_path / "two" / "log2.txt"
    registry = LoggerRegistry()
    first = registry.new("testLog1", first_path, DEFAULT_LEVELS, 0, DEFAULT_FLAGS, 10, 10_000)
    second = registry.new("testLog2", second_path, DEFAULT_LEVELS, 0, DEFAULT_FLAGS, 10, 10_000)

    first.println(Level.DEBUG, "log1")
    second.println(Level.DEBUG, "log2")
    first.shutdown()
    assert second.emit(Level.DEBUG, "after first shutdown") is True
    registry.shutdown_all()

    one = slot_path(first_path, 0).read_text("utf-8")
    two = slot_path(second_path, 0).read_text("utf-8")
    assert "log1" in one and "log2" not in one
    assert "log2" in two and "log1" not in two
    assert "after first shutdown" in two


def test_shutdown_is_idempotent(tmp_path: Path) -> None:
    logger = Logger("twice", tmp_path / "log.txt", DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000)
    target = logger.target
    assert isinstance(target, FileTarget)

    logger.shutdown()
    logger.shutdown()
    assert logger.closed is True
    assert target.closed is True
    assert logger.target is None
    assert logger.emit(Level.ERROR, "after shutdown") is False


def test_close_failure_raises_shutdown_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    logger = Logger("close", tmp_path / "log.txt", DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000)

    def _fail() -> None:
        raise OSError("disk went away")

    monkeypatch.setattr(logger.target, "close", _fail)
    with pytest.raises(ShutdownError, match="disk went away"):
        logger.shutdown()
    assert logger.closed is True
    logger.shutdown()


def test_surrogate_characters_are_escaped_in_files(tmp_path: Path) -> None:
    log_path = tmp_path / "log.txt"
    logger = Logger("escape", log_path, DEFAULT_LEVELS, 0, FormatFlags.NONE, 1, 1000)

    assert logger.emit(Level.INFO, "bad \udc80 byte") is True
    logger.shutdown()
    assert slot_path(log_path, 0).read_text("utf-8") == "info: bad \\udc80 byte\n"


def test_closed_fallback_stream_is_recorded_not_raised() -> None:
    buffer = io.StringIO()
    logger = Logger("closed", "", DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000, fallback=buffer)
    buffer.close()

    assert logger.emit(Level.INFO, "nowhere to go") is False
    assert isinstance(logger.last_error, ValueError)
    logger.shutdown()


def test_write_failure_is_recorded_and_still_counts(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    logger = Logger("full", tmp_path / "log.txt", DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000)

    def _fail(text: str) -> None:
        raise OSError("No space left on device")

    monkeypatch.setattr(logger.target, "write", _fail)
    assert logger.emit(Level.ERROR, "lost") is False
    assert isinstance(logger.last_error, OSError)
    assert "No space left" in str(logger.last_error)
    assert logger.writes_since_check == 1
    logger.shutdown()


def test_mismatched_format_arguments_are_written_raw(tmp_path: Path) -> None:
    log_path = tmp_path / "log.txt"
    logger = Logger("printf", log_path, DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 1000)

    assert logger.log(Level.INFO, "%d items", "notanint") is True
    assert isinstance(logger.last_error, TypeError)
    logger.shutdown()
    assert slot_path(log_path, 0).read_text("utf-8") == "info: %d items ('notanint',)\n"


def test_construction_evicts_slot_zero_when_both_full(tmp_path: Path) -> None:
    log_path = tmp_path / "log.txt"
    slot_path(log_path, 0).write_text("x" * 200, encoding="utf-8")
    slot_path(log_path, 1).write_text("y" * 200, encoding="utf-8")

    logger = Logger("evict", log_path, DEFAULT_LEVELS, 0, FormatFlags.NONE, 10, 100)
    assert logger.rotation == 0
    logger.emit(Level.DEBUG, "fresh start")
    logger.shutdown()

    assert slot_path(log_path, 0).read_text("utf-8") == "debug: fresh start\n"
    assert slot_path(log_path, 1).read_text("utf-8") == "y" * 200
