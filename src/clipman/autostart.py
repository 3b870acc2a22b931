"""
Autostart management for clipman.

Creates/removes $XDG_CONFIG_HOME/autostart/clipman.desktop so the history
starts recording at login (window hidden until toggled).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .platform import autostart_desktop_path


logger = logging.getLogger(__name__)

DESKTOP_CONTENT = """[Desktop Entry]
Type=Application
Name=Clipman
Comment=Clipboard history
Exec=clipman-app --background
Icon=edit-paste-symbolic
X-GNOME-Autostart-enabled=true
OnlyShowIn=GNOME;X-GNOME;X-Cinnamon;XFCE;
"""


def is_enabled() -> bool:
    return autostart_desktop_path().exists()


def enable() -> bool:
    """
    Create/overwrite the autostart desktop file atomically.
    Returns True on success, False otherwise.
    """
    tmp: Optional[Path] = None
    try:
        p = autostart_desktop_path()
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp = p.parent / (p.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            f.write(DESKTOP_CONTENT)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, p)
        return True
    except OSError as e:
        logger.error("Could not enable autostart: %s", e)
        if tmp is not None and tmp.exists():
            tmp.unlink()
        return False


def disable() -> bool:
    """
    Remove the autostart desktop file. Returns True if removed or didn't exist.
    """
    try:
        autostart_desktop_path().unlink(missing_ok=True)
        return True
    except OSError as e:
        logger.error("Could not disable autostart: %s", e)
        return False
