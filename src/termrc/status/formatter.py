"""Right-status line rendering.

The status line is a row of fixed-width fields::

    SCHEME: Nord [RANDOM] │ host │ CPU: 12.5%  │ MEM: 15G    │ BAT: 80%+   │ Tue Mar 4 09:05

Every input may be missing or malformed. Rendering never raises; a field
whose source is unusable shows the ``--`` placeholder instead.
"""

from __future__ import annotations

import logging as py_logging
import math
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime

from termrc.errors import FaultKind
from termrc.status.probe import ProcessResult
from termrc.themes.selector import ThemeState

logger = py_logging.getLogger(__name__)

PLACEHOLDER = "--"
FIELD_WIDTH = 6
SEPARATOR = " │ "
CHARGING_STATE = "Charging"

SCHEME_COLOR = "#61afef"
HOSTNAME_COLOR = "#e5c07b"
CPU_COLOR = "#c678dd"
MEM_COLOR = "#56b6c2"
BATTERY_COLOR = "#e06c75"
DATE_COLOR = "#abb2bf"

_CPU_PATTERN = re.compile(r"CPU usage: ([\d.]+)%\s+user,")
_MEM_PATTERN = re.compile(r"PhysMem: ([\d.]+)([MG]) used")


@dataclass(frozen=True)
class BatteryReading:
    state_of_charge: float
    state: str = "Unknown"


@dataclass(frozen=True)
class StatusSegment:
    color: str
    text: str


@dataclass(frozen=True)
class StatusLine:
    segments: tuple[StatusSegment, ...]

    def __iter__(self) -> Iterator[StatusSegment]:
        return iter(self.segments)

    def plain(self) -> str:
        return "".join(segment.text for segment in self.segments)

    def ansi(self) -> str:
        parts = [f"{_sgr_foreground(segment.color)}{segment.text}" for segment in self.segments]
        return "".join(parts) + "\x1b[0m"


def _sgr_foreground(color: str) -> str:
    value = color.lstrip("#")
    try:
        red, green, blue = (int(value[offset : offset + 2], 16) for offset in (0, 2, 4))
    except ValueError:
        return ""
    return f"\x1b[38;2;{red};{green};{blue}m"


def pad_field(label: str, value: str | None) -> str:
    return f"{label}: {value or PLACEHOLDER:<{FIELD_WIDTH}}"


def _lines(text: str) -> Iterator[str]:
    return (line for line in re.split(r"[\r\n]+", text) if line)


def parse_cpu(text: str) -> str | None:
    for line in _lines(text):
        match = _CPU_PATTERN.search(line)
        if match:
            return f"{match.group(1)}%"
    return None


def parse_mem(text: str) -> str | None:
    for line in _lines(text):
        match = _MEM_PATTERN.search(line)
        if match:
            return f"{match.group(1)}{match.group(2)}"
    return None


def format_battery(readings: Iterable[BatteryReading] | None) -> str:
    if readings is None:
        return pad_field("BAT", None)
    try:
        first = next(iter(readings), None)
    except Exception:
        logger.warning("Battery readings unavailable, showing placeholder", exc_info=True)
        return pad_field("BAT", None)
    if first is None:
        return pad_field("BAT", None)
    charge = getattr(first, "state_of_charge", None)
    if not isinstance(charge, (int, float)) or not math.isfinite(charge):
        return pad_field("BAT", None)
    value = f"{charge * 100:.0f}%"
    if getattr(first, "state", "") == CHARGING_STATE:
        value += "+"
    return pad_field("BAT", value)


def format_date(now: datetime) -> str:
    return f"{now:%a %b} {now.day} {now:%H:%M}"


def process_fields(process_output: ProcessResult | None) -> tuple[str, str]:
    cpu: str | None = None
    mem: str | None = None
    if process_output is not None and process_output.success and isinstance(process_output.stdout, str):
        cpu = parse_cpu(process_output.stdout)
        mem = parse_mem(process_output.stdout)
        if cpu is None or mem is None:
            logger.debug(
                "Stats output incomplete fault=%s cpu=%s mem=%s",
                FaultKind.PATTERN_NOT_MATCHED.value,
                cpu,
                mem,
            )
    return pad_field("CPU", cpu), pad_field("MEM", mem)


def render(
    now: datetime,
    process_output: ProcessResult | None,
    battery_readings: Iterable[BatteryReading] | None,
    hostname: str,
    theme_state: ThemeState,
) -> StatusLine:
    cpu, mem = process_fields(process_output)
    battery = format_battery(battery_readings)
    return StatusLine(
        segments=(
            StatusSegment(
                SCHEME_COLOR,
                f"SCHEME: {theme_state.current_name} [{theme_state.mode_label}]{SEPARATOR}",
            ),
            StatusSegment(HOSTNAME_COLOR, f"{hostname or PLACEHOLDER}{SEPARATOR}"),
            StatusSegment(CPU_COLOR, f"{cpu}{SEPARATOR}"),
            StatusSegment(MEM_COLOR, f"{mem}{SEPARATOR}"),
            StatusSegment(BATTERY_COLOR, f"{battery}{SEPARATOR}"),
            StatusSegment(DATE_COLOR, format_date(now)),
        )
    )
