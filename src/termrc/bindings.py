"""Declarative key bindings, key tables and leader handling."""

from __future__ import annotations

import logging as py_logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Union

from termrc.themes.selector import ThemeOp

logger = py_logging.getLogger(__name__)

LEADER = "LEADER"
RESIZE_STEP = 5
RESIZE_TABLE = "resize_panes"


@dataclass(frozen=True)
class SendString:
    text: str


@dataclass(frozen=True)
class SplitPane:
    direction: str
    domain: str = "CurrentPaneDomain"


@dataclass(frozen=True)
class AdjustPaneSize:
    direction: str
    amount: int = RESIZE_STEP


@dataclass(frozen=True)
class ActivateKeyTable:
    name: str
    one_shot: bool = True
    timeout_ms: int | None = None


@dataclass(frozen=True)
class PopKeyTable:
    pass


@dataclass(frozen=True)
class ToggleAlwaysOnTop:
    pass


@dataclass(frozen=True)
class ThemeCommand:
    op: ThemeOp


Action = Union[
    SendString,
    SplitPane,
    AdjustPaneSize,
    ActivateKeyTable,
    PopKeyTable,
    ToggleAlwaysOnTop,
    ThemeCommand,
]


def parse_mods(mods: str | Iterable[str] | None) -> frozenset[str]:
    if mods is None:
        return frozenset()
    items = mods.split("|") if isinstance(mods, str) else list(mods)
    return frozenset(item.strip().upper() for item in items if item.strip() and item.strip().upper() != "NONE")


@dataclass(frozen=True)
class KeyBinding:
    key: str
    mods: frozenset[str]
    action: Action

    @classmethod
    def of(cls, key: str, mods: str | None, action: Action) -> KeyBinding:
        return cls(key=key, mods=parse_mods(mods), action=action)


@dataclass(frozen=True)
class LeaderKey:
    key: str = "a"
    mods: str = "CTRL"
    timeout_ms: int = 500

    def matches(self, key: str, mods: frozenset[str]) -> bool:
        return key == self.key and mods == parse_mods(self.mods)


def _resize(key: str, direction: str, mods: str | None = None) -> KeyBinding:
    return KeyBinding.of(key, mods, AdjustPaneSize(direction))


def default_key_bindings() -> list[KeyBinding]:
    return [
        KeyBinding.of("LeftArrow", "OPT", SendString("\x1bb")),
        KeyBinding.of("RightArrow", "OPT", SendString("\x1bf")),
        KeyBinding.of('"', LEADER, SplitPane("Horizontal")),
        KeyBinding.of("%", LEADER, SplitPane("Vertical")),
        _resize("LeftArrow", "Left", LEADER),
        _resize("RightArrow", "Right", LEADER),
        _resize("UpArrow", "Up", LEADER),
        _resize("DownArrow", "Down", LEADER),
        KeyBinding.of("r", LEADER, ActivateKeyTable(RESIZE_TABLE, one_shot=False, timeout_ms=3000)),
        KeyBinding.of("f", LEADER, ThemeCommand(ThemeOp.FIX)),
        KeyBinding.of("R", "LEADER|SHIFT", ThemeCommand(ThemeOp.ENABLE_RANDOM)),
        KeyBinding.of("0", LEADER, ThemeCommand(ThemeOp.NEXT)),
        KeyBinding.of("9", LEADER, ThemeCommand(ThemeOp.PREVIOUS)),
        KeyBinding.of("]", "CMD|SHIFT", ToggleAlwaysOnTop()),
    ]


def default_key_tables() -> dict[str, list[KeyBinding]]:
    return {
        RESIZE_TABLE: [
            _resize("h", "Left"),
            _resize("j", "Down"),
            _resize("k", "Up"),
            _resize("l", "Right"),
            _resize("LeftArrow", "Left"),
            _resize("DownArrow", "Down"),
            _resize("UpArrow", "Up"),
            _resize("RightArrow", "Right"),
            KeyBinding.of("Escape", None, PopKeyTable()),
            KeyBinding.of("q", None, PopKeyTable()),
            KeyBinding.of("Enter", None, PopKeyTable()),
        ]
    }


class BindingTable:
    def __init__(self, bindings: Iterable[KeyBinding]) -> None:
        self._bindings: dict[tuple[str, frozenset[str]], Action] = {}
        for binding in bindings:
            self._bindings[(binding.key, binding.mods)] = binding.action

    def __len__(self) -> int:
        return len(self._bindings)

    def resolve(self, key: str, mods: str | Iterable[str] | None = None) -> Action | None:
        return self._bindings.get((key, parse_mods(mods)))


@dataclass
class _ActiveTable:
    name: str
    one_shot: bool
    deadline: float | None


@dataclass
class KeyDispatcher:
    """Resolve raw key presses against the leader, key tables and bindings.

    A leader press arms the leader until its timeout; the next key gets the
    ``LEADER`` modifier. Active key tables are consulted top-down before the
    main table. A one-shot table pops after one key, any table pops when its
    timeout passes.
    """

    bindings: BindingTable
    key_tables: Mapping[str, BindingTable] = field(default_factory=dict)
    leader: LeaderKey | None = field(default_factory=LeaderKey)
    clock: Callable[[], float] = time.monotonic
    _leader_deadline: float | None = field(default=None, init=False)
    _stack: list[_ActiveTable] = field(default_factory=list, init=False)

    @property
    def leader_active(self) -> bool:
        return self._leader_deadline is not None and self.clock() <= self._leader_deadline

    @property
    def active_tables(self) -> list[str]:
        self._expire_tables()
        return [entry.name for entry in self._stack]

    def _expire_tables(self) -> None:
        now = self.clock()
        self._stack = [entry for entry in self._stack if entry.deadline is None or now <= entry.deadline]

    def push_table(self, action: ActivateKeyTable) -> None:
        if action.name not in self.key_tables:
            logger.warning("Unknown key table requested name=%s", action.name)
            return
        deadline = None if action.timeout_ms is None else self.clock() + action.timeout_ms / 1000.0
        self._stack.append(_ActiveTable(action.name, action.one_shot, deadline))

    def pop_table(self) -> None:
        if self._stack:
            self._stack.pop()

    def press(self, key: str, mods: str | Iterable[str] | None = None) -> Action | None:
        parsed = parse_mods(mods)
        if self.leader is not None and self.leader.matches(key, parsed) and not self.leader_active:
            self._leader_deadline = self.clock() + self.leader.timeout_ms / 1000.0
            return None
        if self.leader_active:
            parsed = parsed | {LEADER}
        self._leader_deadline = None

        self._expire_tables()
        if self._stack:
            entry = self._stack[-1]
            action = self.key_tables[entry.name].resolve(key, parsed)
            if entry.one_shot:
                self._stack.pop()
                if isinstance(action, PopKeyTable):
                    return action
            if action is not None:
                return self._track(action)

        return self._track(self.bindings.resolve(key, parsed))

    def _track(self, action: Action | None) -> Action | None:
        if isinstance(action, ActivateKeyTable):
            self.push_table(action)
        elif isinstance(action, PopKeyTable):
            self.pop_table()
        return action
