"""XDG config loading/saving."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from termrc.status.probe import DEFAULT_STATS_COMMAND, DEFAULT_TIMEOUT_SECONDS

DEFAULT_CONFIG_PATH = Path("~/.config/termrc/config.toml").expanduser()
DEFAULT_STATE_DIR = "~/.config/wezterm"
DEFAULT_LIGHT_THEME = "AdventureTime"
DEFAULT_DARK_THEME = "Nord"
DEFAULT_STATUS_INTERVAL_MS = 1000
DEFAULT_NOTIFICATION_MS = 4000
DEFAULT_NOTIFICATION_TITLE = "WezTerm"
DEFAULT_LEADER_KEY = "a"
DEFAULT_LEADER_MODS = "CTRL"
DEFAULT_LEADER_TIMEOUT_MS = 500
STATE_DIR_ENV = "TERMRC_STATE_DIR"


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    state_dir: str = DEFAULT_STATE_DIR
    light_theme: str = DEFAULT_LIGHT_THEME
    dark_theme: str = DEFAULT_DARK_THEME
    status_command: list[str] = Field(default_factory=lambda: list(DEFAULT_STATS_COMMAND))
    status_timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, le=60)
    status_update_interval_ms: int = Field(default=DEFAULT_STATUS_INTERVAL_MS, ge=100, le=60_000)
    notification_duration_ms: int = Field(default=DEFAULT_NOTIFICATION_MS, ge=0, le=60_000)
    notification_title: str = DEFAULT_NOTIFICATION_TITLE
    leader_key: str = DEFAULT_LEADER_KEY
    leader_mods: str = DEFAULT_LEADER_MODS
    leader_timeout_ms: int = Field(default=DEFAULT_LEADER_TIMEOUT_MS, ge=0, le=10_000)
    scheme_names: list[str] = Field(default_factory=list)

    @field_validator("light_theme", "dark_theme", "leader_key")
    @classmethod
    def _validate_non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Value must not be empty")
        return value

    @field_validator("status_command")
    @classmethod
    def _validate_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("Status command must not be empty")
        return value


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    if isinstance(value, list):
        return "[" + ", ".join(_toml_scalar(item) for item in value) + "]"
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _string_list(value: object) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str) and item.strip()]


def _bounded_int(value: object, low: int, high: int) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if low <= value <= high:
        return value
    return None


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    for name in ("state_dir", "notification_title", "leader_mods"):
        value = raw.get(name)
        if isinstance(value, str):
            setattr(cfg, name, value)

    for name in ("light_theme", "dark_theme", "leader_key"):
        value = raw.get(name)
        if isinstance(value, str) and value.strip():
            setattr(cfg, name, value)

    status_command = _string_list(raw.get("status_command"))
    if status_command:
        cfg.status_command = status_command

    timeout = raw.get("status_timeout_seconds")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and 0 < timeout <= 60:
        cfg.status_timeout_seconds = float(timeout)

    interval = _bounded_int(raw.get("status_update_interval_ms"), 100, 60_000)
    if interval is not None:
        cfg.status_update_interval_ms = interval

    duration = _bounded_int(raw.get("notification_duration_ms"), 0, 60_000)
    if duration is not None:
        cfg.notification_duration_ms = duration

    leader_timeout = _bounded_int(raw.get("leader_timeout_ms"), 0, 10_000)
    if leader_timeout is not None:
        cfg.leader_timeout_ms = leader_timeout

    scheme_names = _string_list(raw.get("scheme_names"))
    if scheme_names is not None:
        cfg.scheme_names = scheme_names

    return cfg


def _apply_env(cfg: AppConfig) -> AppConfig:
    env_state_dir = os.getenv(STATE_DIR_ENV, "").strip()
    if env_state_dir:
        cfg.state_dir = env_state_dir
    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return _apply_env(AppConfig())
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return _apply_env(AppConfig())
    if not isinstance(raw, dict):
        return _apply_env(AppConfig())
    return _apply_env(_sanitize(raw))


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    resolved = get_config_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        f"state_dir = {_toml_scalar(config.state_dir)}",
        f"light_theme = {_toml_scalar(config.light_theme)}",
        f"dark_theme = {_toml_scalar(config.dark_theme)}",
        f"status_command = {_toml_scalar(list(config.status_command))}",
        f"status_timeout_seconds = {_toml_scalar(config.status_timeout_seconds)}",
        f"status_update_interval_ms = {_toml_scalar(config.status_update_interval_ms)}",
        f"notification_duration_ms = {_toml_scalar(config.notification_duration_ms)}",
        f"notification_title = {_toml_scalar(config.notification_title)}",
        f"leader_key = {_toml_scalar(config.leader_key)}",
        f"leader_mods = {_toml_scalar(config.leader_mods)}",
        f"leader_timeout_ms = {_toml_scalar(config.leader_timeout_ms)}",
        f"scheme_names = {_toml_scalar(list(config.scheme_names))}",
    ]
    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved
