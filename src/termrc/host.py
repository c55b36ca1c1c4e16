"""Host surface consumed by the event handlers, plus a local implementation."""

from __future__ import annotations

import logging as py_logging
import platform
import socket
import subprocess
import sys
from collections.abc import Callable, Iterable, Sequence
from typing import Protocol, TextIO

import psutil

from termrc.status.formatter import CHARGING_STATE, BatteryReading
from termrc.status.probe import DEFAULT_TIMEOUT_SECONDS, ProcessResult, collect_process_stats

logger = py_logging.getLogger(__name__)

LIGHT_APPEARANCE = "Light"
DARK_APPEARANCE = "Dark"

BUNDLED_SCHEME_NAMES: tuple[str, ...] = (
    "AdventureTime",
    "Afterglow",
    "Ayu Mirage",
    "Catppuccin Mocha",
    "Dracula",
    "Everforest Dark (Gogh)",
    "GruvboxDark",
    "Kanagawa (Gogh)",
    "Monokai Remastered",
    "Nord",
    "OneDark (base16)",
    "Rose Pine (Gogh)",
    "Solarized Dark (Gogh)",
    "Tokyo Night",
    "Tomorrow Night",
)


class Host(Protocol):
    def appearance(self) -> str: ...

    def builtin_scheme_names(self) -> Iterable[str]: ...

    def battery_info(self) -> Sequence[BatteryReading]: ...

    def hostname(self) -> str: ...

    def run_child_process(self, argv: Sequence[str]) -> ProcessResult: ...


class Window(Protocol):
    def get_config_overrides(self) -> dict[str, object] | None: ...

    def set_config_overrides(self, overrides: dict[str, object]) -> None: ...

    def set_right_status(self, text: str) -> None: ...

    def toast_notification(
        self,
        title: str,
        body: str,
        icon: str | None = None,
        duration_ms: int | None = None,
    ) -> None: ...

    def perform_action(self, action: object) -> None: ...


class LocalHost:
    """Host backed by the running machine.

    Appearance comes from the macOS global interface style, batteries from
    psutil, processes from ``subprocess``. Scheme names are the configured
    list, or a bundled list when none is configured.
    """

    def __init__(
        self,
        *,
        scheme_names: Iterable[str] | None = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        system_name: str | None = None,
    ) -> None:
        names = list(scheme_names or [])
        self._scheme_names = tuple(names) if names else BUNDLED_SCHEME_NAMES
        self._runner = runner
        self.timeout_seconds = timeout_seconds
        self._system = system_name or platform.system()

    def appearance(self) -> str:
        if self._system != "Darwin":
            return LIGHT_APPEARANCE
        try:
            completed = self._runner(
                ["defaults", "read", "-g", "AppleInterfaceStyle"],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("Appearance query failed: %s", exc)
            return LIGHT_APPEARANCE
        if completed.returncode == 0 and DARK_APPEARANCE in (completed.stdout or ""):
            return DARK_APPEARANCE
        return LIGHT_APPEARANCE

    def builtin_scheme_names(self) -> tuple[str, ...]:
        return self._scheme_names

    def battery_info(self) -> list[BatteryReading]:
        try:
            battery = psutil.sensors_battery()
        except (AttributeError, NotImplementedError, OSError) as exc:
            logger.debug("Battery query unavailable: %s", exc)
            return []
        if battery is None:
            return []
        if battery.power_plugged and battery.percent < 100:
            state = CHARGING_STATE
        elif battery.power_plugged:
            state = "Full"
        else:
            state = "Discharging"
        return [BatteryReading(state_of_charge=battery.percent / 100.0, state=state)]

    def hostname(self) -> str:
        try:
            return socket.gethostname()
        except OSError:
            return ""

    def run_child_process(self, argv: Sequence[str]) -> ProcessResult:
        return collect_process_stats(argv, runner=self._runner, timeout=self.timeout_seconds)


class ConsoleWindow:
    """Window that keeps overrides in memory and writes output to a stream."""

    def __init__(self, stream: TextIO | None = None, *, echo_status: bool = True) -> None:
        self.stream = stream or sys.stdout
        self.echo_status = echo_status
        self.overrides: dict[str, object] | None = None
        self.right_status = ""
        self.notifications: list[tuple[str, str]] = []
        self.actions: list[object] = []

    def get_config_overrides(self) -> dict[str, object] | None:
        return self.overrides

    def set_config_overrides(self, overrides: dict[str, object]) -> None:
        self.overrides = dict(overrides)

    def set_right_status(self, text: str) -> None:
        self.right_status = text
        if self.echo_status:
            print(text, file=self.stream)

    def toast_notification(
        self,
        title: str,
        body: str,
        icon: str | None = None,
        duration_ms: int | None = None,
    ) -> None:
        del icon, duration_ms
        self.notifications.append((title, body))
        print(f"{title}: {body}", file=self.stream)

    def perform_action(self, action: object) -> None:
        self.actions.append(action)
