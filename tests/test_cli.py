"""Behavioral tests for the server command line."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from server import _parse_args, build_settings

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SERVER_PATH = PROJECT_ROOT / "server.py"


def _run_server(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, str(SERVER_PATH), *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        check=False,
        timeout=20,
    )


def test_missing_port_prints_usage() -> None:
    result = _run_server()

    assert result.returncode != 0
    assert "usage:" in result.stderr
    assert result.stdout == ""


@pytest.mark.parametrize("port", ["http", "-1", "70000"])
def test_malformed_port_prints_usage(port: str) -> None:
    result = _run_server(port)

    assert result.returncode != 0
    assert "usage:" in result.stderr


def test_flags_override_file_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCROOT", raising=False)
    config_path = tmp_path / "tiny.yaml"
    config_path.write_text("doc_root: /from/file\nlog_format: json\n")

    args = _parse_args(["8080", "--config", str(config_path), "--root", "/from/flag", "--timeout", "3"])
    settings = build_settings(args)

    assert args.port == 8080
    assert settings.doc_root == "/from/flag"
    assert settings.log_format == "json"
    assert settings.socket_timeout_secs == 3.0
