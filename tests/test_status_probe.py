from __future__ import annotations

import subprocess

from termrc.status.probe import DEFAULT_STATS_COMMAND, collect_process_stats


def _cp(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def test_collect_runs_default_top_command() -> None:
    calls: list[list[str]] = []

    def runner(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        calls.append(cmd)
        assert kwargs["capture_output"] is True
        assert kwargs["shell"] is False
        return _cp(0, stdout="CPU usage: 1% user,")

    result = collect_process_stats(runner=runner)

    assert calls == [list(DEFAULT_STATS_COMMAND)]
    assert result.success is True
    assert result.stdout == "CPU usage: 1% user,"


def test_nonzero_exit_is_reported_as_failure() -> None:
    result = collect_process_stats(["top"], runner=lambda cmd, **_: _cp(1, stderr="denied"))
    assert result.success is False
    assert result.stderr == "denied"


def test_missing_binary_is_reported_as_failure() -> None:
    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    result = collect_process_stats(["top"], runner=runner)
    assert result.success is False
    assert result.stdout == ""


def test_timeout_is_reported_as_failure() -> None:
    def runner(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    result = collect_process_stats(["top"], runner=runner, timeout=0.1)
    assert result.success is False
    assert result.stderr == "Command timed out."
