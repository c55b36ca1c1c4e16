"""Theme catalog and rotation."""

from .catalog import ThemeCatalog
from .selector import AppearanceDefaults, ThemeChange, ThemeOp, ThemeSelector, ThemeState

__all__ = [
    "AppearanceDefaults",
    "ThemeCatalog",
    "ThemeChange",
    "ThemeOp",
    "ThemeSelector",
    "ThemeState",
]
