"""Deterministic error model, exit codes and recovered fault kinds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    THEME_ERROR = 5


class FaultKind(str, Enum):
    """Faults that are recovered locally with a default and only logged."""

    FILE_ABSENT = "file_absent"
    FILE_WRITE_FAILED = "file_write_failed"
    PROCESS_INVOCATION_FAILED = "process_invocation_failed"
    PATTERN_NOT_MATCHED = "pattern_not_matched"
    NAME_NOT_IN_CATALOG = "name_not_in_catalog"


@dataclass
class TermrcError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


@dataclass
class EmptyCatalogError(TermrcError):
    message: str = "The theme catalog is empty"
    code: ExitCode = ExitCode.THEME_ERROR
    hint: str = "Configure at least one color scheme name."


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
