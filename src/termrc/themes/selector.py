"""Current theme and random-mode state with file-backed persistence."""

from __future__ import annotations

import logging as py_logging
import random
from dataclasses import dataclass, replace
from enum import Enum

from termrc.store import THEME_CURRENT_KEY, THEME_RANDOM_KEY, KeyValueStore
from termrc.themes.catalog import ThemeCatalog

logger = py_logging.getLogger(__name__)


class ThemeOp(str, Enum):
    RELOAD = "reload"
    NEXT = "next"
    PREVIOUS = "previous"
    FIX = "fix"
    ENABLE_RANDOM = "enable_random"


@dataclass(frozen=True)
class AppearanceDefaults:
    light: str = "AdventureTime"
    dark: str = "Nord"

    def for_appearance(self, appearance: str) -> str:
        if "Dark" in appearance:
            return self.dark
        return self.light


@dataclass(frozen=True)
class ThemeState:
    current_name: str
    random_enabled: bool

    @property
    def mode_label(self) -> str:
        return "RANDOM" if self.random_enabled else "FIXED"


@dataclass(frozen=True)
class ThemeChange:
    op: ThemeOp
    state: ThemeState
    fixed_now: bool = False

    @property
    def name(self) -> str:
        return self.state.current_name

    @property
    def message(self) -> str:
        if self.op is ThemeOp.ENABLE_RANDOM:
            return "Random themes enabled"
        if self.op is ThemeOp.FIX or self.fixed_now:
            return f"Theme fixed: {self.name}"
        return f"Theme: {self.name}"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class ThemeSelector:
    """Owns the ThemeState and mirrors every mutation to the store.

    Cycling with ``next``/``previous`` implies fixing, so both switch random
    mode off. The two state files are written independently.
    """

    def __init__(self, catalog: ThemeCatalog, store: KeyValueStore, state: ThemeState) -> None:
        self.catalog = catalog
        self.store = store
        self._state = state

    @classmethod
    def initialize(
        cls,
        catalog: ThemeCatalog,
        store: KeyValueStore,
        *,
        appearance: str = "",
        defaults: AppearanceDefaults | None = None,
    ) -> ThemeSelector:
        persisted_flag = store.load(THEME_RANDOM_KEY)
        random_enabled = persisted_flag is None or persisted_flag == "true"
        persisted_name = store.load(THEME_CURRENT_KEY)
        if persisted_name is None:
            current_name = (defaults or AppearanceDefaults()).for_appearance(appearance)
        else:
            current_name = persisted_name
        state = ThemeState(current_name=current_name, random_enabled=random_enabled)
        logger.debug(
            "Initialized theme state name=%s random=%s appearance=%s",
            state.current_name,
            state.random_enabled,
            appearance,
        )
        return cls(catalog, store, state)

    @property
    def state(self) -> ThemeState:
        return self._state

    def on_reload(self, rng: random.Random | None = None) -> ThemeChange:
        if not self._state.random_enabled:
            return ThemeChange(op=ThemeOp.RELOAD, state=self._state)
        scheme = self.catalog.random_choice(rng)
        self._state = replace(self._state, current_name=scheme)
        self.store.save(THEME_CURRENT_KEY, scheme)
        logger.info("Your colour scheme is now: %s", scheme)
        return ThemeChange(op=ThemeOp.RELOAD, state=self._state)

    def next(self) -> ThemeChange:
        return self._step(1, ThemeOp.NEXT)

    def previous(self) -> ThemeChange:
        return self._step(-1, ThemeOp.PREVIOUS)

    def _step(self, offset: int, op: ThemeOp) -> ThemeChange:
        index = self.catalog.index_of(self._state.current_name)
        scheme = self.catalog.at(index + offset)
        fixed_now = self._state.random_enabled
        self._state = ThemeState(current_name=scheme, random_enabled=False)
        self.store.save(THEME_CURRENT_KEY, scheme)
        if fixed_now:
            self.store.save(THEME_RANDOM_KEY, _flag(False))
        logger.debug("Cycled theme op=%s name=%s fixed_now=%s", op.value, scheme, fixed_now)
        return ThemeChange(op=op, state=self._state, fixed_now=fixed_now)

    def fix(self) -> ThemeChange:
        fixed_now = self._state.random_enabled
        self._state = replace(self._state, random_enabled=False)
        self.store.save(THEME_RANDOM_KEY, _flag(False))
        self.store.save(THEME_CURRENT_KEY, self._state.current_name)
        return ThemeChange(op=ThemeOp.FIX, state=self._state, fixed_now=fixed_now)

    def enable_random(self) -> ThemeChange:
        self._state = replace(self._state, random_enabled=True)
        self.store.save(THEME_RANDOM_KEY, _flag(True))
        return ThemeChange(op=ThemeOp.ENABLE_RANDOM, state=self._state)

    def apply(self, op: ThemeOp, rng: random.Random | None = None) -> ThemeChange:
        if op is ThemeOp.NEXT:
            return self.next()
        if op is ThemeOp.PREVIOUS:
            return self.previous()
        if op is ThemeOp.FIX:
            return self.fix()
        if op is ThemeOp.ENABLE_RANDOM:
            return self.enable_random()
        return self.on_reload(rng)
