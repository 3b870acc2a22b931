"""
GNOME custom shortcut for toggling the clipman history window, via Gio.Settings.

The binding runs `clipman-app`; launching the application while it is already
running toggles the window of the existing instance.

Schema keys:
- org.gnome.settings-daemon.plugins.media-keys
  - custom-keybindings: array of object paths
- org.gnome.settings-daemon.plugins.media-keys.custom-keybinding
  - name (string), command (string), binding (string like "<Shift><Super>v")
"""

from __future__ import annotations

from typing import List

try:
    import gi
    gi.require_version("Gio", "2.0")
    from gi.repository import Gio  # type: ignore
except Exception:
    Gio = None  # type: ignore


BASE_SCHEMA = "org.gnome.settings-daemon.plugins.media-keys"
CUSTOM_SCHEMA = "org.gnome.settings-daemon.plugins.media-keys.custom-keybinding"
BASE_KEY = "custom-keybindings"

# Path must end with a slash
PATH_PREFIX = "/org/gnome/settings-daemon/plugins/media-keys/custom-keybindings/"
TOGGLE_SUFFIX = "clipman-toggle-history/"
TOGGLE_NAME = "Clipman: Toggle History"
TOGGLE_COMMAND = "clipman-app"


def _ensure_gio() -> None:
    if Gio is None:
        raise RuntimeError("Gio not available (PyGObject missing)")


def _get_base_settings():
    return Gio.Settings.new(BASE_SCHEMA)  # type: ignore


def _get_paths(base) -> List[str]:
    return list(base.get_strv(BASE_KEY))


def _set_paths(base, paths: List[str]) -> None:
    base.set_strv(BASE_KEY, paths)


def _custom_settings_for(path: str):
    return Gio.Settings.new_with_path(CUSTOM_SCHEMA, path)  # type: ignore


def install_toggle_binding(binding: str, command: str = TOGGLE_COMMAND) -> str:
    """
    Create or update the toggle keybinding. Returns its settings path.
    """
    _ensure_gio()
    if not binding:
        raise ValueError("binding must not be empty")
    base = _get_base_settings()
    paths = _get_paths(base)

    full_path = f"{PATH_PREFIX}{TOGGLE_SUFFIX}"
    if full_path not in paths:
        paths.append(full_path)
        _set_paths(base, paths)

    custom = _custom_settings_for(full_path)
    custom.set_string("name", TOGGLE_NAME)
    custom.set_string("command", command)
    custom.set_string("binding", binding)
    return full_path


def remove_toggle_binding() -> bool:
    """
    Remove the toggle keybinding. Returns True if it was installed.
    """
    _ensure_gio()
    base = _get_base_settings()
    paths = _get_paths(base)

    full_path = f"{PATH_PREFIX}{TOGGLE_SUFFIX}"
    if full_path not in paths:
        return False
    paths.remove(full_path)
    _set_paths(base, paths)
    # Reset the orphaned entry so it does not linger in dconf
    custom = _custom_settings_for(full_path)
    for key in ("name", "command", "binding"):
        custom.reset(key)
    return True
