"""Unit tests for line rendering and format flag parsing."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from rotalog.errors import ConfigurationError
from rotalog.utils.formatting import DEFAULT_FLAGS, FormatFlags, parse_flags, render_line

WHEN = datetime(2024, 5, 1, 13, 4, 5, 123456, tzinfo=timezone.utc)


def test_plain_line_has_label_prefix_only() -> None:
    assert render_line("debug", "hello") == "debug: hello\n"
    assert render_line("debug", "already terminated\n") == "debug: already terminated\n"


def test_timestamp_and_location_prefix() -> None:
    line = render_line(
        "info",
        "service started",
        DEFAULT_FLAGS,
        when=WHEN,
        location=("/srv/app/app.py", 42),
    )
    assert line == "info: 2024/05/01 13:04:05.123456 app.py:42: service started\n"


def test_longfile_keeps_full_path() -> None:
    line = render_line("info", "x", FormatFlags.LONGFILE, location=("/srv/app/app.py", 7))
    assert line == "info: /srv/app/app.py:7: x\n"


def test_align_level_pads_to_width() -> None:
    assert render_line("info", "x", FormatFlags.ALIGN_LEVEL, width=7) == "info:    x\n"
    assert render_line("warning", "x", FormatFlags.ALIGN_LEVEL, width=7) == "warning: x\n"


def test_parse_flags_forms() -> None:
    assert parse_flags("date,time") == FormatFlags.DATE | FormatFlags.TIME
    assert parse_flags(["shortfile"]) == FormatFlags.SHORTFILE
    assert parse_flags("default") == DEFAULT_FLAGS
    assert parse_flags("none") == FormatFlags.NONE
    assert parse_flags(int(FormatFlags.UTC)) == FormatFlags.UTC
    with pytest.raises(ConfigurationError, match="Unknown format flag"):
        parse_flags("colour")
