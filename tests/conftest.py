from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from termrc.status.formatter import BatteryReading
from termrc.status.probe import ProcessResult
from termrc.store import KeyValueStore

TOP_OUTPUT = "\n".join(
    [
        "Processes: 612 total, 3 running, 609 sleeping, 3120 threads",
        "2024/03/04 09:05:11",
        "Load Avg: 2.10, 2.34, 2.51",
        "CPU usage: 7.45% user, 5.12% sys, 87.42% idle",
        "SharedLibs: 512M resident, 96M data, 48M linkedit.",
        "PhysMem: 15G used (2310M wired, 1024M compressor), 420M unused.",
        "VM: 210T vsize, 4781M framework vsize, 0(0) swapins, 0(0) swapouts.",
    ]
)


class FakeHost:
    def __init__(
        self,
        schemes: Sequence[str] = ("A", "B", "C"),
        *,
        appearance: str = "Dark",
        process: ProcessResult | None = None,
        batteries: Sequence[BatteryReading] = (),
        hostname: str = "devbox",
    ) -> None:
        self.schemes = list(schemes)
        self._appearance = appearance
        self.process = process or ProcessResult(success=True, stdout=TOP_OUTPUT)
        self.batteries = list(batteries)
        self._hostname = hostname
        self.commands: list[list[str]] = []

    def appearance(self) -> str:
        return self._appearance

    def builtin_scheme_names(self) -> list[str]:
        return list(self.schemes)

    def battery_info(self) -> list[BatteryReading]:
        return list(self.batteries)

    def hostname(self) -> str:
        return self._hostname

    def run_child_process(self, argv: Sequence[str]) -> ProcessResult:
        self.commands.append(list(argv))
        return self.process


class FakeWindow:
    def __init__(self, overrides: dict[str, object] | None = None) -> None:
        self.overrides = overrides
        self.right_status: list[str] = []
        self.toasts: list[tuple[str, str, str | None, int | None]] = []
        self.actions: list[object] = []

    def get_config_overrides(self) -> dict[str, object] | None:
        return self.overrides

    def set_config_overrides(self, overrides: dict[str, object]) -> None:
        self.overrides = dict(overrides)

    def set_right_status(self, text: str) -> None:
        self.right_status.append(text)

    def toast_notification(
        self,
        title: str,
        body: str,
        icon: str | None = None,
        duration_ms: int | None = None,
    ) -> None:
        self.toasts.append((title, body, icon, duration_ms))

    def perform_action(self, action: object) -> None:
        self.actions.append(action)


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "state")


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def fake_window() -> FakeWindow:
    return FakeWindow()


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)
