"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import json
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

from .app import TermrcApp
from .config import AppConfig, load_config, save_config
from .errors import ExitCode, TermrcError, user_facing_error
from .events import EventKind
from .host import ConsoleWindow, Host, LocalHost
from .logging import configure_logging, default_log_path
from .store import KeyValueStore
from .themes.selector import ThemeOp

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")
_THEME_COMMANDS = {
    "next": ThemeOp.NEXT,
    "previous": ThemeOp.PREVIOUS,
    "fix": ThemeOp.FIX,
    "random": ThemeOp.ENABLE_RANDOM,
}
_COMMANDS = ("show", "status", "reload", "list-themes", "init-config", *_THEME_COMMANDS)


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termrc")
    parser.add_argument("command", nargs="?", choices=_COMMANDS, default="show")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    parser.add_argument("--state-dir", type=Path, default=None, help="Directory holding theme state files")
    parser.add_argument("--plain", action="store_true", help="Print the status line without colors")
    parser.add_argument("--log-level", type=_log_level_type, default="WARN")
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def _resolve_config(namespace: argparse.Namespace) -> AppConfig:
    config = load_config(namespace.config)
    if namespace.state_dir is not None:
        config.state_dir = str(namespace.state_dir)
    return config


def run_command(
    namespace: argparse.Namespace,
    *,
    host: Host | None = None,
    stream: TextIO | None = None,
) -> int:
    out = stream or sys.stdout
    config = _resolve_config(namespace)
    if namespace.command == "init-config":
        print(save_config(config, namespace.config), file=out)
        return int(ExitCode.SUCCESS)

    local_host = host or LocalHost(
        scheme_names=config.scheme_names,
        timeout_seconds=config.status_timeout_seconds,
    )
    app = TermrcApp(local_host, config, store=KeyValueStore(config.state_dir))
    window = ConsoleWindow(out, echo_status=False)
    app.dispatch(EventKind.STARTUP)
    command = namespace.command

    if command in _THEME_COMMANDS:
        app.apply_theme_command(window, _THEME_COMMANDS[command])
        return int(ExitCode.SUCCESS)

    if command == "reload":
        change = app.dispatch(EventKind.CONFIG_RELOAD, window)
        if change is not None:
            print(change.name, file=out)
        return int(ExitCode.SUCCESS)

    if command == "status":
        line = app.dispatch(EventKind.STATUS_TICK, window)
        if line is not None:
            print(line.plain() if namespace.plain else line.ansi(), file=out)
        return int(ExitCode.SUCCESS)

    if command == "list-themes":
        selector = app.selector
        current = selector.state.current_name
        for name in selector.catalog:
            marker = "*" if name == current else " "
            print(f"{marker} {name}", file=out)
        return int(ExitCode.SUCCESS)

    state = app.selector.state
    payload = {
        "theme": state.current_name,
        "random_enabled": state.random_enabled,
        "state_dir": str(app.store.directory),
        "settings": app.terminal_settings(),
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False), file=out)
    return int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    command_runner: Callable[[argparse.Namespace], int] | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(level="WARN", log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level, log_file=log_path)

    try:
        logger.debug("Running command %s", namespace.command)
        return (command_runner or run_command)(namespace)
    except TermrcError as exc:
        logger.error(
            "Handled TermrcError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
