"""Flat-file key/value persistence for theme state."""

from __future__ import annotations

import logging as py_logging
from pathlib import Path

from termrc.errors import FaultKind

logger = py_logging.getLogger(__name__)

DEFAULT_STATE_DIR = Path("~/.config/wezterm")
THEME_RANDOM_KEY = "theme_random"
THEME_CURRENT_KEY = "theme_current"


class KeyValueStore:
    """One file per key, the file body is the value.

    Writes overwrite in place. Reads and writes never raise: a missing or
    unreadable file loads as ``None`` and a failed write returns ``False``.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        raw = Path(directory) if directory is not None else DEFAULT_STATE_DIR
        try:
            self.directory = raw.expanduser()
        except RuntimeError:
            self.directory = raw

    def path_for(self, key: str) -> Path:
        return self.directory / key

    def save(self, key: str, value: str) -> bool:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as exc:
            logger.warning(
                "State write failed fault=%s key=%s path=%s error=%s",
                FaultKind.FILE_WRITE_FAILED.value,
                key,
                path,
                exc,
            )
            return False
        logger.debug("Saved state key=%s value=%s", key, value)
        return True

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug(
                "State read fell back to absent fault=%s key=%s error=%s",
                FaultKind.FILE_ABSENT.value,
                key,
                exc,
            )
            return None
