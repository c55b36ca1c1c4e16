"""Order-stable catalog of available color scheme names."""

from __future__ import annotations

import logging as py_logging
import random
from collections.abc import Iterable, Iterator
from typing import Protocol

from termrc.errors import EmptyCatalogError, FaultKind

logger = py_logging.getLogger(__name__)


class SchemeSource(Protocol):
    def builtin_scheme_names(self) -> Iterable[str]: ...


class ThemeCatalog:
    def __init__(self, names: Iterable[str]) -> None:
        seen: set[str] = set()
        ordered: list[str] = []
        for name in names:
            if not isinstance(name, str) or not name or name in seen:
                continue
            seen.add(name)
            ordered.append(name)
        self._names: tuple[str, ...] = tuple(ordered)

    @classmethod
    def load(cls, source: SchemeSource) -> ThemeCatalog:
        catalog = cls(source.builtin_scheme_names())
        logger.debug("Loaded theme catalog with %s schemes", len(catalog))
        return catalog

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def _require_entries(self) -> None:
        if not self._names:
            raise EmptyCatalogError()

    def index_of(self, name: str) -> int:
        """Return the index of ``name``, or 0 (the first entry) when unknown."""
        self._require_entries()
        try:
            return self._names.index(name)
        except ValueError:
            logger.debug(
                "Theme not in catalog fault=%s name=%s",
                FaultKind.NAME_NOT_IN_CATALOG.value,
                name,
            )
            return 0

    def at(self, index: int) -> str:
        self._require_entries()
        return self._names[index % len(self._names)]

    def random_choice(self, rng: random.Random | None = None) -> str:
        self._require_entries()
        return (rng or random).choice(self._names)
