"""Synchronous process-statistics probe used by the status line."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from termrc.errors import FaultKind

logger = py_logging.getLogger(__name__)

DEFAULT_STATS_COMMAND: tuple[str, ...] = (
    "top",
    "-l",
    "1",
    "-n",
    "0",
    "-stats",
    "pid,command,cpu,mem",
    "-o",
    "cpu",
)
DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class ProcessResult:
    success: bool
    stdout: str = ""
    stderr: str = ""


def collect_process_stats(
    command: Sequence[str] = DEFAULT_STATS_COMMAND,
    *,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
) -> ProcessResult:
    argv = list(command)
    try:
        completed = runner(
            argv,
            shell=False,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "Stats command timed out fault=%s command=%s",
            FaultKind.PROCESS_INVOCATION_FAILED.value,
            argv,
        )
        return ProcessResult(success=False, stderr="Command timed out.")
    except OSError as exc:
        logger.warning(
            "Stats command could not start fault=%s command=%s error=%s",
            FaultKind.PROCESS_INVOCATION_FAILED.value,
            argv,
            exc,
        )
        return ProcessResult(success=False, stderr=str(exc))

    stdout = completed.stdout if isinstance(completed.stdout, str) else ""
    stderr = completed.stderr if isinstance(completed.stderr, str) else ""
    success = completed.returncode == 0
    if not success:
        logger.debug(
            "Stats command failed fault=%s returncode=%s",
            FaultKind.PROCESS_INVOCATION_FAILED.value,
            completed.returncode,
        )
    return ProcessResult(success=success, stdout=stdout, stderr=stderr)
