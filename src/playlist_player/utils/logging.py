"""Colored logging formatter for console output."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Records logged with ``TRANSPORT_NOOP_EXTRA`` are rendered dimmed and tagged
    ``[noop]`` so ignored transport commands stand apart from real
    transitions. Colors are disabled when the ``NO_COLOR`` environment
    variable is set or when the output stream is not a TTY.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    DIM = "\033[2m"
    RESET = "\033[0m"
    NOOP_TAG = "[noop] "

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        *,
        stream: TextIO | None = None,
    ) -> None:
        super().__init__(fmt, datefmt)
        self._stream = stream

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        is_noop = getattr(record, "transport_noop", False)
        use_color = self._use_color()
        if not (use_color or is_noop):
            return super().format(record)

        record = logging.makeLogRecord(record.__dict__)
        if is_noop:
            record.msg = f"{self.NOOP_TAG}{record.msg}"
        if use_color:
            color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"

        output = super().format(record)
        if use_color and is_noop:
            return f"{self.DIM}{output}{self.RESET}"
        return output
