from __future__ import annotations

from datetime import datetime

from conftest import TOP_OUTPUT
from termrc.status import BatteryReading, ProcessResult, render
from termrc.status.formatter import format_battery, format_date, parse_cpu, parse_mem
from termrc.themes import ThemeState

NOW = datetime(2024, 3, 4, 9, 5, 42)
STATE = ThemeState(current_name="Nord", random_enabled=True)


def test_parse_cpu_and_mem_from_top_output() -> None:
    assert parse_cpu(TOP_OUTPUT) == "7.45%"
    assert parse_mem(TOP_OUTPUT) == "15G"


def test_first_match_wins() -> None:
    text = "CPU usage: 1.5% user, 2% sys\r\nCPU usage: 99.0% user, 1% sys\nPhysMem: 800M used\nPhysMem: 9G used"
    assert parse_cpu(text) == "1.5%"
    assert parse_mem(text) == "800M"


def test_unmatched_patterns_return_none() -> None:
    assert parse_cpu("CPU usage: n/a") is None
    assert parse_mem("PhysMem: 12T used") is None
    assert parse_cpu("") is None


def test_battery_takes_first_reading_and_marks_charging() -> None:
    readings = [BatteryReading(0.804, "Charging"), BatteryReading(0.1, "Discharging")]
    assert format_battery(readings) == "BAT: 80%+  "


def test_battery_discharging_and_missing() -> None:
    assert format_battery([BatteryReading(1.0, "Full")]) == "BAT: 100%  "
    assert format_battery([]) == "BAT: --    "
    assert format_battery(None) == "BAT: --    "
    assert format_battery([BatteryReading(float("nan"), "Unknown")]) == "BAT: --    "


def test_battery_source_failing_during_iteration_shows_placeholder() -> None:
    def readings():
        raise RuntimeError("power service gone")
        yield BatteryReading(0.5, "Charging")

    assert format_battery(readings()) == "BAT: --    "
    line = render(NOW, None, readings(), "h", ThemeState("A", True))
    assert "BAT: --    " in line.plain()


def test_date_has_unpadded_day_and_no_seconds() -> None:
    assert format_date(NOW) == "Mon Mar 4 09:05"


def test_render_full_status_line() -> None:
    line = render(
        NOW,
        ProcessResult(success=True, stdout=TOP_OUTPUT),
        [BatteryReading(0.5, "Discharging")],
        "devbox",
        STATE,
    )

    assert line.plain() == (
        "SCHEME: Nord [RANDOM] │ devbox │ CPU: 7.45%  │ MEM: 15G    │ BAT: 50%    │ Mon Mar 4 09:05"
    )
    assert [segment.color for segment in line] == [
        "#61afef",
        "#e5c07b",
        "#c678dd",
        "#56b6c2",
        "#e06c75",
        "#abb2bf",
    ]


def test_failed_process_yields_fixed_width_placeholders() -> None:
    line = render(NOW, ProcessResult(success=False, stderr="boom"), [], "devbox", STATE)
    text = line.plain()
    assert "CPU: --    " in text
    assert "MEM: --    " in text


def test_missing_process_output_and_fixed_mode() -> None:
    state = ThemeState(current_name="A", random_enabled=False)
    text = render(NOW, None, None, "", state).plain()
    assert text.startswith("SCHEME: A [FIXED] │ -- │ CPU: --     │ MEM: --     │ BAT: --     │ ")


def test_malformed_output_degrades_per_field() -> None:
    process = ProcessResult(success=True, stdout="PhysMem: 3.5G used (1G wired)\ngarbage")
    text = render(NOW, process, [], "h", STATE).plain()
    assert "CPU: --     │ MEM: 3.5G   │" in text


def test_ansi_output_wraps_segments_in_truecolor_escapes() -> None:
    line = render(NOW, None, [], "h", STATE)
    ansi = line.ansi()
    assert ansi.startswith("\x1b[38;2;97;175;239mSCHEME: Nord")
    assert ansi.endswith("\x1b[0m")
