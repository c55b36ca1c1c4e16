"""Event handlers wiring the host to theme rotation, status and key bindings."""

from __future__ import annotations

import logging as py_logging
import random
import time
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TypeVar

from typing_extensions import TypedDict

from termrc.bindings import (
    Action,
    BindingTable,
    KeyBinding,
    KeyDispatcher,
    LeaderKey,
    ThemeCommand,
    default_key_bindings,
    default_key_tables,
)
from termrc.config import AppConfig
from termrc.errors import TermrcError
from termrc.events import EventDispatcher, EventKind
from termrc.host import Host, Window
from termrc.status.formatter import StatusLine, render
from termrc.status.probe import ProcessResult
from termrc.store import KeyValueStore
from termrc.themes.catalog import ThemeCatalog
from termrc.themes.selector import AppearanceDefaults, ThemeChange, ThemeOp, ThemeSelector

logger = py_logging.getLogger(__name__)

T = TypeVar("T")

_OVERRIDING_OPS = {ThemeOp.NEXT, ThemeOp.PREVIOUS}


class BindingPayload(TypedDict):
    key: str
    mods: str
    action: str


def _binding_payload(binding: KeyBinding) -> BindingPayload:
    return BindingPayload(
        key=binding.key,
        mods="|".join(sorted(binding.mods)),
        action=type(binding.action).__name__,
    )


class TermrcApp:
    def __init__(
        self,
        host: Host,
        config: AppConfig | None = None,
        *,
        store: KeyValueStore | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
        key_clock: Callable[[], float] = time.monotonic,
        bindings: Iterable[KeyBinding] | None = None,
        key_tables: dict[str, list[KeyBinding]] | None = None,
    ) -> None:
        self.host = host
        self.config = config or AppConfig()
        self.store = store or KeyValueStore(self.config.state_dir)
        self.rng = rng or random.Random()
        self.clock = clock
        self._bindings = list(bindings) if bindings is not None else default_key_bindings()
        self._key_tables = key_tables if key_tables is not None else default_key_tables()
        self.leader = LeaderKey(
            key=self.config.leader_key,
            mods=self.config.leader_mods,
            timeout_ms=self.config.leader_timeout_ms,
        )
        self.keys = KeyDispatcher(
            BindingTable(self._bindings),
            {name: BindingTable(items) for name, items in self._key_tables.items()},
            leader=self.leader,
            clock=key_clock,
        )
        self.catalog: ThemeCatalog | None = None
        self._selector: ThemeSelector | None = None

        self.events = EventDispatcher()
        self.events.register(EventKind.STARTUP, self.on_startup)
        self.events.register(EventKind.CONFIG_RELOAD, self.on_config_reload)
        self.events.register(EventKind.STATUS_TICK, self.on_status_tick)
        self.events.register(EventKind.KEY_PRESS, self.on_key_press)

    @property
    def selector(self) -> ThemeSelector:
        if self._selector is None:
            return self._initialize_selector()
        return self._selector

    def _host_call(self, name: str, call: Callable[[], T], default: T) -> T:
        try:
            return call()
        except Exception:
            logger.exception("Host query failed name=%s", name)
            return default

    def _initialize_selector(self) -> ThemeSelector:
        catalog = self.catalog if self.catalog is not None else ThemeCatalog.load(self.host)
        self.catalog = catalog
        appearance = self._host_call("appearance", self.host.appearance, "")
        selector = ThemeSelector.initialize(
            catalog,
            self.store,
            appearance=appearance,
            defaults=AppearanceDefaults(light=self.config.light_theme, dark=self.config.dark_theme),
        )
        self._selector = selector
        return selector

    def on_startup(self) -> dict[str, object]:
        logger.info("Loading configuration")
        self._initialize_selector()
        return self.terminal_settings()

    def on_config_reload(self, window: Window) -> ThemeChange | None:
        if window.get_config_overrides() is not None:
            return None
        try:
            change = self.selector.on_reload(self.rng)
        except TermrcError as exc:
            logger.warning("Theme reload skipped: %s", exc)
            return None
        window.set_config_overrides({"color_scheme": change.name})
        return change

    def on_status_tick(self, window: Window) -> StatusLine:
        process_output = self._host_call(
            "run_child_process",
            lambda: self.host.run_child_process(self.config.status_command),
            ProcessResult(success=False),
        )
        batteries = self._host_call("battery_info", self.host.battery_info, [])
        hostname = self._host_call("hostname", self.host.hostname, "")
        line = render(self.clock(), process_output, batteries, hostname, self.selector.state)
        window.set_right_status(line.ansi())
        return line

    def on_key_press(self, window: Window, key: str, mods: str | None = None) -> Action | None:
        action = self.keys.press(key, mods)
        if action is None:
            return None
        if isinstance(action, ThemeCommand):
            self.run_theme_command(window, action.op)
        else:
            window.perform_action(action)
        return action

    def run_theme_command(self, window: Window, op: ThemeOp) -> ThemeChange | None:
        try:
            return self.apply_theme_command(window, op)
        except TermrcError as exc:
            logger.warning("Theme command failed op=%s: %s", op.value, exc)
            return None

    def apply_theme_command(self, window: Window, op: ThemeOp) -> ThemeChange:
        change = self.selector.apply(op, self.rng)
        if op in _OVERRIDING_OPS:
            window.set_config_overrides({"color_scheme": change.name})
        window.toast_notification(
            self.config.notification_title,
            change.message,
            None,
            self.config.notification_duration_ms,
        )
        return change

    def dispatch(self, kind: EventKind, *args: Any, **kwargs: Any) -> Any:
        results = self.events.emit(kind, *args, **kwargs)
        return results[0] if results else None

    def terminal_settings(self) -> dict[str, object]:
        color_scheme = self._selector.state.current_name if self._selector is not None else self.config.dark_theme
        return {
            "color_scheme": color_scheme,
            "initial_rows": 32,
            "initial_cols": 80,
            "window_decorations": "RESIZE",
            "window_frame": {
                "font": {"family": "Berkeley Mono", "weight": "Bold"},
                "font_size": 11,
            },
            "font": ["IosevkaTermSlab Nerd Font Mono", "Symbols Nerd Font Mono"],
            "font_size": 15.4,
            "line_height": 0.8,
            "cell_width": 1.0,
            "enable_tab_bar": True,
            "tab_bar_at_bottom": True,
            "window_background_opacity": 0.5,
            "macos_window_background_blur": 44,
            "status_update_interval": self.config.status_update_interval_ms,
            "leader": {
                "key": self.leader.key,
                "mods": self.leader.mods,
                "timeout_milliseconds": self.leader.timeout_ms,
            },
            "keys": [_binding_payload(binding) for binding in self._bindings],
            "key_tables": {
                name: [_binding_payload(binding) for binding in items]
                for name, items in self._key_tables.items()
            },
        }
