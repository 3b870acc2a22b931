"""
Configuration loading for clipman.

- settings.ini in XDG config dir (~/.config/clipman/settings.ini)

Provides:
- Settings (INI) as a lightweight dict-like wrapper with typed accessors.
- history_size change notification for the history controller, fed by
  set_history_size(), reload() and (optionally) a Gio.FileMonitor on the file.
"""

from __future__ import annotations

import configparser
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

try:
    import gi
    gi.require_version("Gio", "2.0")
    gi.require_version("GLib", "2.0")
    from gi.repository import Gio, GLib  # type: ignore
except Exception:
    Gio = None  # type: ignore
    GLib = None  # type: ignore

from .platform import ensure_dirs, settings_path


logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 15
DEFAULT_POLL_INTERVAL_MS = 500
DEFAULT_TOGGLE_BINDING = "<Shift><Super>v"
RELOAD_DEBOUNCE_MS = 200

DEFAULT_SETTINGS = {
    "general": {
        "history_size": str(DEFAULT_HISTORY_SIZE),
        "poll_interval_ms": str(DEFAULT_POLL_INTERVAL_MS),
    },
    "shortcuts": {
        "toggle_history": DEFAULT_TOGGLE_BINDING,
    },
}


def _parser_with_defaults() -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    for section, kv in DEFAULT_SETTINGS.items():
        parser.add_section(section)
        for k, v in kv.items():
            parser.set(section, k, v)
    return parser


def _write_ini_atomic(parser: configparser.ConfigParser, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile("w", encoding="utf-8", delete=False, dir=path.parent, prefix=path.name + ".") as tf:
        parser.write(tf)
        tf.flush()
        os.fsync(tf.fileno())
        tmpname = tf.name
    os.replace(tmpname, path)


@dataclass
class Settings:
    config: configparser.ConfigParser
    path: Path
    _listeners: Dict[int, Callable[[], None]] = field(default_factory=dict, repr=False)
    _next_id: int = field(default=1, repr=False)
    _monitor: Any = field(default=None, repr=False)
    _debounce_id: int = field(default=0, repr=False)

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> str:
        return self.config.get(section, key, fallback=fallback)  # type: ignore[no-any-return]

    def getint(self, section: str, key: str, fallback: Optional[int] = None) -> int:
        try:
            return self.config.getint(section, key)  # type: ignore[no-any-return]
        except (configparser.Error, ValueError):
            if fallback is None:
                raise
            return fallback

    # ---- History size (consumed by the controller) ----

    def get_history_size(self) -> int:
        # range checking (<= 0) is the controller's job
        return self.getint("general", "history_size", fallback=DEFAULT_HISTORY_SIZE)

    def set_history_size(self, size: int) -> None:
        previous = self.get_history_size()
        previous_raw = self.config.get("general", "history_size", fallback=None)
        self.config.set("general", "history_size", str(int(size)))
        try:
            _write_ini_atomic(self.config, self.path)
        except OSError:
            # memory must keep matching the file on disk
            if previous_raw is None:
                self.config.remove_option("general", "history_size")
            else:
                self.config.set("general", "history_size", previous_raw)
            raise
        if previous != int(size):
            self._notify()

    @property
    def poll_interval_ms(self) -> int:
        return max(0, self.getint("general", "poll_interval_ms", fallback=DEFAULT_POLL_INTERVAL_MS))

    @property
    def toggle_binding(self) -> str:
        return self.get("shortcuts", "toggle_history", fallback=DEFAULT_TOGGLE_BINDING)

    # ---- Change notification ----

    def subscribe(self, on_history_size_changed: Callable[[], None]) -> int:
        handler_id = self._next_id
        self._next_id += 1
        self._listeners[handler_id] = on_history_size_changed
        return handler_id

    def unsubscribe(self, handler_id: int) -> None:
        self._listeners.pop(handler_id, None)

    def reload(self) -> bool:
        """
        Re-read settings.ini. Notifies subscribers and returns True if
        history_size changed.
        """
        previous = self.get_history_size()
        parser = _parser_with_defaults()
        try:
            parser.read(self.path, encoding="utf-8")
        except configparser.Error as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return False
        self.config = parser
        if self.get_history_size() != previous:
            self._notify()
            return True
        return False

    def watch(self) -> None:
        """Reload automatically when settings.ini is edited outside the app."""
        if Gio is None:
            raise RuntimeError("Gio not available (PyGObject missing)")
        if self._monitor is not None:
            return
        gfile = Gio.File.new_for_path(str(self.path))
        self._monitor = gfile.monitor_file(Gio.FileMonitorFlags.NONE, None)
        self._monitor.connect("changed", self._on_file_changed)

    def unwatch(self) -> None:
        if self._debounce_id:
            GLib.source_remove(self._debounce_id)  # type: ignore
            self._debounce_id = 0
        if self._monitor is not None:
            self._monitor.cancel()
            self._monitor = None

    def _on_file_changed(self, _monitor, *_args) -> None:
        # editors emit several events per save; reload once they settle
        if self._debounce_id:
            return
        self._debounce_id = GLib.timeout_add(RELOAD_DEBOUNCE_MS, self._reload_debounced)  # type: ignore

    def _reload_debounced(self) -> bool:
        self._debounce_id = 0
        logger.debug("Settings file changed on disk, reloading")
        self.reload()
        return False

    def _notify(self) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener()
            except Exception:
                logger.exception("Settings listener failed")


def load_settings(path: Optional[Path] = None) -> Settings:
    if path is None:
        ensure_dirs()
        path = settings_path()

    parser = _parser_with_defaults()
    if path.exists():
        try:
            parser.read(path, encoding="utf-8")
        except configparser.Error as e:
            # continue with defaults
            logger.warning("Ignoring unreadable settings file %s: %s", path, e)
            parser = _parser_with_defaults()

    return Settings(parser, path)
