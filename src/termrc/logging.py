"""Logging setup for the ``termrc`` logger tree.

The stream handler shows records at the requested level. When a log file is
given, the file receives every DEBUG record as well, including the
locally recovered faults that never reach the console.
"""

from __future__ import annotations

import logging as py_logging
import sys
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "termrc"
LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
DEFAULT_LOG_PATH = Path("~/.config/termrc/logs/termrc.log")
_FALLBACK_LOG_PATH = Path(".termrc/logs/termrc.log")
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def _absolute(path: Path) -> Path:
    try:
        expanded = path.expanduser()
    except RuntimeError:
        expanded = path
    return expanded if expanded.is_absolute() else expanded.resolve()


def default_log_path() -> Path:
    try:
        resolved = DEFAULT_LOG_PATH.expanduser()
    except RuntimeError:
        return (Path.cwd() / _FALLBACK_LOG_PATH).resolve()
    return _absolute(resolved)


def resolve_level(level: str) -> int:
    return LOG_LEVELS.get(level.upper(), py_logging.INFO)


def _open_file_handler(log_file: str | Path, formatter: py_logging.Formatter) -> py_logging.Handler | None:
    log_path = _absolute(Path(log_file))
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = py_logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return None
    handler.setLevel(py_logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    *,
    log_file: str | Path | None = None,
) -> py_logging.Logger:
    threshold = resolve_level(level)
    formatter = py_logging.Formatter(_FORMAT)

    logger = py_logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    console = py_logging.StreamHandler(stream or sys.stderr)
    console.setLevel(threshold)
    console.setFormatter(formatter)
    logger.addHandler(console)

    file_handler = _open_file_handler(log_file, formatter) if log_file else None
    if file_handler is not None:
        logger.addHandler(file_handler)
        logger.setLevel(py_logging.DEBUG)
    else:
        logger.setLevel(threshold)

    logger.propagate = False
    return logger
