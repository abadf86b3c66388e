"""Tests for ColoredFormatter."""

import logging
from io import StringIO

import pytest

from playlist_player.domain.shared.messages import TRANSPORT_NOOP_EXTRA
from playlist_player.utils.logging import ColoredFormatter

RESET = "\033[0m"
DIM = "\033[2m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def _stream(tty: bool) -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: tty  # type: ignore[attr-defined]
    return stream


@pytest.fixture(autouse=True)
def _no_color_unset(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.mark.parametrize("level", sorted(LEVEL_COLORS))
    def test_levelname_colored_on_tty(self, level):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_stream(True))

        output = fmt.format(_make_record(level))

        assert output.startswith(LEVEL_COLORS[level])
        assert f"{logging.getLevelName(level)}{RESET} | test" in output

    def test_plain_when_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_stream(False))

        assert fmt.format(_make_record(logging.INFO)) == "INFO | test"

    def test_no_color_env_disables_colors(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_stream(True))

        assert fmt.format(_make_record(logging.ERROR)) == "ERROR | test"

    def test_original_record_not_mutated(self):
        """Should leave the record intact for other handlers."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_stream(True))
        record = _make_record(logging.WARNING)

        fmt.format(record)

        assert record.levelname == "WARNING"


class TestTransportNoopTag:
    """Tests for records logged with TRANSPORT_NOOP_EXTRA."""

    def test_noop_tag_without_color(self):
        fmt = ColoredFormatter("%(message)s", stream=_stream(False))
        record = _make_record(logging.DEBUG, "ignored start", **TRANSPORT_NOOP_EXTRA)

        assert fmt.format(record) == "[noop] ignored start"

    def test_noop_dimmed_with_color(self):
        fmt = ColoredFormatter("%(message)s", stream=_stream(True))
        record = _make_record(logging.DEBUG, "ignored start", **TRANSPORT_NOOP_EXTRA)

        output = fmt.format(record)

        assert output == f"{DIM}[noop] ignored start{RESET}"

    def test_noop_record_message_args_preserved(self):
        fmt = ColoredFormatter("%(message)s", stream=_stream(False))
        record = logging.LogRecord(
            "t", logging.DEBUG, "t.py", 1, "skip %s", ("next",), None
        )
        record.transport_noop = True

        assert fmt.format(record) == "[noop] skip next"
        assert record.msg == "skip %s"

    def test_logged_through_handler(self):
        stream = _stream(False)
        handler = logging.StreamHandler(stream)
        handler.setFormatter(ColoredFormatter("%(message)s", stream=stream))
        log = logging.getLogger("test.colored.noop")
        log.addHandler(handler)
        log.setLevel(logging.DEBUG)
        log.propagate = False
        try:
            log.debug("at bounds", extra=TRANSPORT_NOOP_EXTRA)
            log.info("moved")
        finally:
            log.removeHandler(handler)

        assert stream.getvalue().splitlines() == ["[noop] at bounds", "moved"]
