"""Leveled round logger on top of :mod:`logging`.

Lines look like::

    [2026-10-19 12:00:00.123] [INFO] Commit verified locally.

Messages may be strings or anything JSON-serialisable.  A broken sink
(full disk, closed stream) is reported through :meth:`logging.Handler.handleError`
and never reaches the round.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

LOGGER_NAME = "fluq"


class RoundFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        ts = datetime.fromtimestamp(record.created)
        return ts.strftime("%Y-%m-%d %H:%M:%S.") + f"{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        level = "WARN" if record.levelno == logging.WARNING else record.levelname
        return f"[{self.formatTime(record)}] [{level}] {record.getMessage()}"


def render(msg: Any, *details: Any) -> str:
    """Turn a message plus optional details into one log line body."""
    parts = [msg, *details]
    out = []
    for part in parts:
        if isinstance(part, str):
            out.append(part)
            continue
        try:
            out.append(json.dumps(part, default=str))
        except (TypeError, ValueError):
            out.append(str(part))
    return " ".join(out)


class RoundLogger:
    """debug/info/warn/error sink used by the round pipeline."""

    def __init__(self, name: str = LOGGER_NAME, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _emit(self, level: int, msg: Any, details: tuple) -> None:
        try:
            self._logger.log(level, "%s", render(msg, *details))
        except Exception:  # noqa: BLE001 - logging must never abort a round
            pass

    def debug(self, msg: Any, *details: Any) -> None:
        self._emit(logging.DEBUG, msg, details)

    def info(self, msg: Any, *details: Any) -> None:
        self._emit(logging.INFO, msg, details)

    def warn(self, msg: Any, *details: Any) -> None:
        self._emit(logging.WARNING, msg, details)

    warning = warn

    def error(self, msg: Any, *details: Any) -> None:
        self._emit(logging.ERROR, msg, details)


def configure_logging(
    level: int = logging.INFO,
    log_file: str | Path | None = None,
    stream=None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the ``fluq`` logger once.

    *log_file* defaults to the ``LOG_FILE`` environment variable.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # the console stream may have been swapped (e.g. by a test runner) since last time
    for h in [h for h in logger.handlers if getattr(h, "fluq_console", False)]:
        logger.removeHandler(h)
    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(RoundFormatter())
    console.fluq_console = True  # type: ignore[attr-defined]
    logger.addHandler(console)

    log_file = log_file or os.environ.get("LOG_FILE")
    if log_file:
        path = Path(log_file).absolute()
        if not any(getattr(h, "baseFilename", None) == str(path) for h in logger.handlers):
            handler = logging.FileHandler(path, encoding="utf-8", delay=True)
            handler.setFormatter(RoundFormatter())
            logger.addHandler(handler)
    return logger


def get_logger() -> RoundLogger:
    return RoundLogger()
