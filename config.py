"""Configuration constants and settings loading for the tiny HTTP server."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

HOST: str = "0.0.0.0"
PORT: int = 8000
DOC_ROOT: str = "."
CGI_MARKER: str = "cgi-bin"
DEFAULT_INDEX: str = "index.html"
CGI_ARGS_ENV: str = "QUERY_STRING"
SERVER_NAME: str = "The Tiny Web server"
MAX_LINE_BYTES: int = 8192
MAX_ERROR_BODY_BYTES: int = 8192
SOCKET_TIMEOUT_SECS: float = 10.0
CGI_TIMEOUT_SECS: float = 30.0
ACCEPT_POLL_SECS: float = 0.2
LOG_FORMAT: str = "plain"
DOCROOT_ENV: str = "DOCROOT"


@dataclass(slots=True)
class ServerSettings:
    host: str = HOST
    doc_root: str = DOC_ROOT
    cgi_marker: str = CGI_MARKER
    default_index: str = DEFAULT_INDEX
    socket_timeout_secs: float = SOCKET_TIMEOUT_SECS
    cgi_timeout_secs: float = CGI_TIMEOUT_SECS
    log_format: str = LOG_FORMAT


_TIMEOUT_SETTINGS = frozenset({"socket_timeout_secs", "cgi_timeout_secs"})


def _check_setting(path: str | Path, name: str, value: object) -> None:
    if name in _TIMEOUT_SETTINGS:
        # bool is an int subclass.
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"{path}: {name} must be a positive number, got {value!r}")
    elif not isinstance(value, str) or not value:
        raise ValueError(f"{path}: {name} must be a non-empty string, got {value!r}")


def load_settings(path: str | Path | None = None) -> ServerSettings:
    """Build settings from defaults, an optional YAML file, then the environment."""
    values: dict[str, object] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as file_descriptor:
            loaded = yaml.safe_load(file_descriptor)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{path}: expected a mapping of settings")
        known = {item.name for item in dataclasses.fields(ServerSettings)}
        unknown = sorted(set(loaded) - known)
        if unknown:
            raise ValueError(f"{path}: unknown settings: {', '.join(unknown)}")
        for name, value in loaded.items():
            _check_setting(path, name, value)
        values.update(loaded)

    doc_root_override = os.getenv(DOCROOT_ENV)
    if doc_root_override:
        values["doc_root"] = doc_root_override

    settings = ServerSettings(**values)
    if settings.log_format not in {"plain", "json"}:
        raise ValueError(f"Unsupported log format: {settings.log_format}")
    return settings
