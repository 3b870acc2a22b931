"""Tests for XDG path resolution and session detection."""

import pytest

from clipman import platform


@pytest.fixture
def home(tmp_path, monkeypatch):
    for var in ("XDG_CONFIG_HOME", "XDG_STATE_HOME", "XDG_SESSION_TYPE", "WAYLAND_DISPLAY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


class TestPaths:
    def test_defaults_under_home(self, home):
        assert platform.settings_path() == home / ".config" / "clipman" / "settings.ini"
        assert platform.xdg_state_dir() == home / ".local" / "state" / "clipman"
        assert platform.autostart_desktop_path() == home / ".config" / "autostart" / "clipman.desktop"

    def test_xdg_overrides(self, home, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(home / "cfg"))
        monkeypatch.setenv("XDG_STATE_HOME", str(home / "st"))

        assert platform.xdg_config_dir() == home / "cfg" / "clipman"
        assert platform.xdg_state_dir() == home / "st" / "clipman"
        assert platform.autostart_desktop_path() == home / "cfg" / "autostart" / "clipman.desktop"

    def test_empty_xdg_variable_uses_default(self, home, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", "")

        assert platform.xdg_config_dir() == home / ".config" / "clipman"

    def test_ensure_dirs_creates_config_and_state(self, home):
        platform.ensure_dirs()

        assert platform.xdg_config_dir().is_dir()
        assert platform.xdg_state_dir().is_dir()


class TestSessionDetection:
    def test_x11_session(self, home, monkeypatch):
        monkeypatch.setenv("XDG_SESSION_TYPE", "x11")

        assert platform.is_wayland_session() is False

    def test_session_type_is_case_insensitive(self, home, monkeypatch):
        monkeypatch.setenv("XDG_SESSION_TYPE", "Wayland")

        assert platform.is_wayland_session() is True

    def test_wayland_display_alone_is_enough(self, home, monkeypatch):
        monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-0")

        assert platform.is_wayland_session() is True
