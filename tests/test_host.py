from __future__ import annotations

import io
import subprocess
from collections import namedtuple

import pytest

import termrc.host as host_module
from termrc.host import BUNDLED_SCHEME_NAMES, ConsoleWindow, LocalHost
from termrc.status import BatteryReading

_Battery = namedtuple("_Battery", ["percent", "secsleft", "power_plugged"])


def _cp(returncode: int, stdout: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


def test_local_host_uses_configured_schemes_or_bundled_list() -> None:
    assert LocalHost(scheme_names=["X", "Y"]).builtin_scheme_names() == ("X", "Y")
    assert LocalHost().builtin_scheme_names() == BUNDLED_SCHEME_NAMES
    assert "Nord" in BUNDLED_SCHEME_NAMES
    assert "AdventureTime" in BUNDLED_SCHEME_NAMES


def test_appearance_reads_macos_interface_style() -> None:
    dark = LocalHost(system_name="Darwin", runner=lambda cmd, **_: _cp(0, "Dark\n"))
    light = LocalHost(system_name="Darwin", runner=lambda cmd, **_: _cp(1))
    assert dark.appearance() == "Dark"
    assert light.appearance() == "Light"


def test_appearance_defaults_to_light_off_macos() -> None:
    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        raise AssertionError("should not spawn")

    assert LocalHost(system_name="Linux", runner=runner).appearance() == "Light"


def test_appearance_query_failure_is_light() -> None:
    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        raise FileNotFoundError(cmd[0])

    assert LocalHost(system_name="Darwin", runner=runner).appearance() == "Light"


@pytest.mark.parametrize(
    ("battery", "expected"),
    [
        (_Battery(55.0, 100, True), [BatteryReading(0.55, "Charging")]),
        (_Battery(100.0, 100, True), [BatteryReading(1.0, "Full")]),
        (_Battery(20.0, 100, False), [BatteryReading(0.2, "Discharging")]),
        (None, []),
    ],
)
def test_battery_info_maps_psutil_reading(monkeypatch, battery, expected) -> None:
    monkeypatch.setattr(host_module.psutil, "sensors_battery", lambda: battery)
    assert LocalHost().battery_info() == expected


def test_run_child_process_uses_probe() -> None:
    host = LocalHost(runner=lambda cmd, **_: _cp(0, "PhysMem: 1G used"))
    result = host.run_child_process(["top"])
    assert result.success is True
    assert result.stdout == "PhysMem: 1G used"


def test_console_window_records_and_prints() -> None:
    stream = io.StringIO()
    window = ConsoleWindow(stream)

    window.set_config_overrides({"color_scheme": "Nord"})
    window.toast_notification("WezTerm", "Theme: Nord", None, 4000)
    window.set_right_status("status text")

    assert window.get_config_overrides() == {"color_scheme": "Nord"}
    assert window.notifications == [("WezTerm", "Theme: Nord")]
    assert stream.getvalue() == "WezTerm: Theme: Nord\nstatus text\n"


def test_console_window_can_keep_status_quiet() -> None:
    stream = io.StringIO()
    window = ConsoleWindow(stream, echo_status=False)
    window.set_right_status("status text")
    assert window.right_status == "status text"
    assert stream.getvalue() == ""
