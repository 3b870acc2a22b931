"""
Platform utilities for clipman: XDG paths and session detection.
"""

from __future__ import annotations

import os
from pathlib import Path


APP_NAME = "clipman"
DESKTOP_FILENAME = "clipman.desktop"


def _xdg_base(env_var: str, *home_parts: str) -> Path:
    base = os.environ.get(env_var)
    return Path(base) if base else Path.home().joinpath(*home_parts)


def xdg_config_dir() -> Path:
    return _xdg_base("XDG_CONFIG_HOME", ".config") / APP_NAME


def xdg_state_dir() -> Path:
    return _xdg_base("XDG_STATE_HOME", ".local", "state") / APP_NAME


def settings_path() -> Path:
    return xdg_config_dir() / "settings.ini"


def autostart_desktop_path() -> Path:
    return _xdg_base("XDG_CONFIG_HOME", ".config") / "autostart" / DESKTOP_FILENAME


def ensure_dirs() -> None:
    xdg_config_dir().mkdir(parents=True, exist_ok=True)
    xdg_state_dir().mkdir(parents=True, exist_ok=True)


def is_wayland_session() -> bool:
    """Wayland hides other clients' clipboard changes from unfocused windows."""
    session = os.environ.get("XDG_SESSION_TYPE", "").lower()
    return session == "wayland" or bool(os.environ.get("WAYLAND_DISPLAY"))
