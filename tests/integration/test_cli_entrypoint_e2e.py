from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path


def _env_with_pythonpath(tmp_path: Path) -> dict[str, str]:
    env = dict(os.environ)
    existing = env.get("PYTHONPATH", "")
    src_path = str((Path(__file__).resolve().parents[2] / "src"))
    env["PYTHONPATH"] = f"{src_path}{os.pathsep}{existing}" if existing else src_path
    env["HOME"] = str(tmp_path)
    env.pop("TERMRC_STATE_DIR", None)
    return env


def _run(tmp_path: Path, *args: str) -> subprocess.CompletedProcess:
    config = tmp_path / "config.toml"
    if not config.exists():
        config.write_text('scheme_names = ["A", "B", "C"]\nstatus_command = ["false"]\n', encoding="utf-8")
    return subprocess.run(
        [
            sys.executable,
            "-m",
            "termrc",
            *args,
            "--config",
            str(config),
            "--state-dir",
            str(tmp_path / "state"),
            "--log-file",
            str(tmp_path / "termrc.log"),
        ],
        capture_output=True,
        text=True,
        check=False,
        env=_env_with_pythonpath(tmp_path),
    )


def test_cli_module_reports_invalid_command_via_exit_code(tmp_path: Path) -> None:
    completed = _run(tmp_path, "spin")

    assert completed.returncode == 2
    assert "invalid choice" in completed.stderr


def test_cli_cycles_and_persists_theme_state(tmp_path: Path) -> None:
    (tmp_path / "state").mkdir()
    (tmp_path / "state" / "theme_current").write_text("B", encoding="utf-8")

    completed = _run(tmp_path, "next")

    assert completed.returncode == 0
    assert completed.stdout.strip() == "WezTerm: Theme fixed: C"
    assert (tmp_path / "state" / "theme_current").read_text(encoding="utf-8") == "C"
    assert (tmp_path / "state" / "theme_random").read_text(encoding="utf-8") == "false"

    completed = _run(tmp_path, "previous")
    assert completed.stdout.strip() == "WezTerm: Theme: B"


def test_cli_status_survives_failing_probe(tmp_path: Path) -> None:
    completed = _run(tmp_path, "status", "--plain")

    assert completed.returncode == 0
    assert "CPU: --     │ MEM: --    " in completed.stdout


def test_cli_show_reports_state(tmp_path: Path) -> None:
    completed = _run(tmp_path, "random")
    assert completed.stdout.strip() == "WezTerm: Random themes enabled"

    completed = _run(tmp_path, "show")
    payload = json.loads(completed.stdout)
    assert payload["random_enabled"] is True
    assert payload["settings"]["window_decorations"] == "RESIZE"
