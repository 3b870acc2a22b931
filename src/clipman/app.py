#!/usr/bin/env python3
"""
clipman-app: GTK4 clipboard history manager.

- Owns one settings object, one clipboard backend, one history controller and
  one history window for the lifetime of the process.
- Keeps running in the background (application hold) so history keeps being
  recorded while the window is hidden.
- Launching clipman-app again activates the running instance, which toggles
  the window; this is what the GNOME keybinding runs.

Requirements:
- Python 3.9+
- PyGObject with GTK 4 (provided by system packages, e.g., python3-gi, gir1.2-gtk-4.0)

Run:
    clipman-app
    clipman-app --install-shortcut
    clipman-app --remove-shortcut
    clipman-app --background          (start hidden; used by autostart)
    clipman-app --enable-autostart
    clipman-app --disable-autostart
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

try:
    import gi
    gi.require_version("Gtk", "4.0")
    gi.require_version("Gio", "2.0")
    from gi.repository import Gtk, Gio  # type: ignore
except Exception as e:
    print("Error: GTK4/PyGObject not available. Please install system packages (e.g., python3-gi, gir1.2-gtk-4.0).")
    print(f"Details: {e}")
    sys.exit(1)

from . import autostart, gnome_shortcuts
from .clipboard import GdkClipboardBackend
from .config import Settings, load_settings
from .controller import BackendUnavailable, ClipboardHistoryController
from .logging_setup import setup_logging
from .platform import is_wayland_session
from .ui.main_window import HistoryWindow


APPLICATION_ID = "org.clipman.app"


class ClipmanApplication(Gtk.Application):
    def __init__(self, start_hidden: bool = False) -> None:
        super().__init__(application_id=APPLICATION_ID,
                         flags=Gio.ApplicationFlags.FLAGS_NONE)
        self._logger = setup_logging()
        self._settings: Optional[Settings] = None
        self._backend: Optional[GdkClipboardBackend] = None
        self._controller: Optional[ClipboardHistoryController] = None
        self._window: Optional[HistoryWindow] = None
        self.failed = False
        self._start_hidden = start_hidden

    def do_startup(self) -> None:
        # Explicitly chain to Gtk.Application to avoid GI binding quirks
        Gtk.Application.do_startup(self)
        self._logger.info("Starting clipman (wayland=%s)", is_wayland_session())

        self._settings = load_settings()
        try:
            self._settings.watch()
        except RuntimeError as e:
            self._logger.warning("Settings file will not be watched: %s", e)

        poll_ms = self._settings.poll_interval_ms
        if poll_ms == 0 and is_wayland_session():
            self._logger.warning("Polling disabled under Wayland; changes from other apps may be missed")
        try:
            self._backend = GdkClipboardBackend(poll_interval_ms=poll_ms)
            self._controller = ClipboardHistoryController(self._backend, self._settings)
        except BackendUnavailable as e:
            self._logger.error("Cannot start history engine: %s", e)
            self.failed = True
            if self._backend is not None:
                self._backend.destroy()
                self._backend = None
            return

        quit_action = Gio.SimpleAction.new("quit", None)
        quit_action.connect("activate", lambda *_a: self.quit())
        self.add_action(quit_action)
        self.set_accels_for_action("app.quit", ["<Control>q"])

        # keep recording while no window is visible
        self.hold()

    def do_activate(self) -> None:
        if self._controller is None or self._settings is None:
            self.quit()
            return
        if self._window is None:
            self._window = HistoryWindow(self, self._controller, self._settings)
            if self._start_hidden:
                self._start_hidden = False
            else:
                self._window.show_history()
            return
        self._window.toggle()

    def do_shutdown(self) -> None:
        self._logger.info("Shutting down")
        if self._controller is not None:
            self._controller.destroy()
            self._controller = None
        if self._backend is not None:
            self._backend.destroy()
            self._backend = None
        if self._settings is not None:
            self._settings.unwatch()
        Gtk.Application.do_shutdown(self)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clipman-app", description="Clipboard history manager")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--install-shortcut", action="store_true",
                       help="install the GNOME keybinding that toggles the history window")
    group.add_argument("--remove-shortcut", action="store_true",
                       help="remove the GNOME keybinding")
    group.add_argument("--enable-autostart", action="store_true",
                       help="start clipman hidden at login")
    group.add_argument("--disable-autostart", action="store_true",
                       help="do not start clipman at login")
    parser.add_argument("--background", action="store_true",
                        help="start without showing the history window")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(argv if argv is not None else sys.argv)
    args, gtk_args = _build_parser().parse_known_args(argv[1:])

    if args.install_shortcut:
        binding = load_settings().toggle_binding
        path = gnome_shortcuts.install_toggle_binding(binding)
        print(f"Installed {binding} -> {gnome_shortcuts.TOGGLE_COMMAND} ({path})")
        return 0
    if args.remove_shortcut:
        removed = gnome_shortcuts.remove_toggle_binding()
        print("Removed" if removed else "Not installed")
        return 0
    if args.enable_autostart:
        return 0 if autostart.enable() else 1
    if args.disable_autostart:
        return 0 if autostart.disable() else 1

    app = ClipmanApplication(start_hidden=args.background)
    status = app.run([argv[0]] + gtk_args)
    if app.failed:
        return 1
    return status


if __name__ == "__main__":
    sys.exit(main())
