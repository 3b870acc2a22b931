"""Tests for settings.ini loading and change notification."""

import configparser

import pytest

from clipman.config import DEFAULT_HISTORY_SIZE, DEFAULT_TOGGLE_BINDING, load_settings


@pytest.fixture
def ini_path(tmp_path):
    return tmp_path / "settings.ini"


def write_ini(path, **general):
    lines = ["[general]"] + [f"{k} = {v}" for k, v in general.items()]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


class TestLoad:
    def test_defaults_without_file(self, ini_path):
        settings = load_settings(ini_path)

        assert settings.get_history_size() == DEFAULT_HISTORY_SIZE
        assert settings.poll_interval_ms == 500
        assert settings.toggle_binding == DEFAULT_TOGGLE_BINDING
        assert not ini_path.exists()

    def test_values_from_file(self, ini_path):
        write_ini(ini_path, history_size=42, poll_interval_ms=0)

        settings = load_settings(ini_path)

        assert settings.get_history_size() == 42
        assert settings.poll_interval_ms == 0

    def test_non_integer_falls_back_to_default(self, ini_path):
        write_ini(ini_path, history_size="lots", poll_interval_ms="-20")

        settings = load_settings(ini_path)

        assert settings.get_history_size() == DEFAULT_HISTORY_SIZE
        assert settings.poll_interval_ms == 0

    def test_out_of_range_size_passed_through(self, ini_path):
        write_ini(ini_path, history_size=-3)

        assert load_settings(ini_path).get_history_size() == -3

    def test_unparsable_file_uses_defaults(self, ini_path):
        ini_path.write_text("history_size = 3\n", encoding="utf-8")

        settings = load_settings(ini_path)

        assert settings.get_history_size() == DEFAULT_HISTORY_SIZE

    def test_default_location_follows_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))

        settings = load_settings()

        assert settings.path == tmp_path / "cfg" / "clipman" / "settings.ini"
        assert settings.path.parent.is_dir()


class TestHistorySizeChanges:
    def test_set_history_size_persists_and_notifies(self, ini_path):
        settings = load_settings(ini_path)
        calls = []
        settings.subscribe(lambda: calls.append(settings.get_history_size()))

        settings.set_history_size(8)

        assert calls == [8]
        parser = configparser.ConfigParser()
        parser.read(ini_path, encoding="utf-8")
        assert parser.getint("general", "history_size") == 8
        assert parser.get("shortcuts", "toggle_history") == DEFAULT_TOGGLE_BINDING
        assert load_settings(ini_path).get_history_size() == 8

    def test_same_value_does_not_notify(self, ini_path):
        settings = load_settings(ini_path)
        calls = []
        settings.subscribe(lambda: calls.append(True))

        settings.set_history_size(DEFAULT_HISTORY_SIZE)

        assert calls == []

    def test_reload_notifies_only_on_change(self, ini_path):
        write_ini(ini_path, history_size=10)
        settings = load_settings(ini_path)
        calls = []
        settings.subscribe(lambda: calls.append(settings.get_history_size()))

        write_ini(ini_path, history_size=10, poll_interval_ms=100)
        assert settings.reload() is False
        assert settings.poll_interval_ms == 100

        write_ini(ini_path, history_size=3)
        assert settings.reload() is True
        assert calls == [3]

    def test_unsubscribe(self, ini_path):
        settings = load_settings(ini_path)
        calls = []
        handler_id = settings.subscribe(lambda: calls.append(True))
        settings.unsubscribe(handler_id)

        settings.set_history_size(2)

        assert calls == []

    def test_failing_listener_is_isolated(self, ini_path):
        settings = load_settings(ini_path)
        calls = []

        def boom():
            raise RuntimeError("listener broke")

        settings.subscribe(boom)
        settings.subscribe(lambda: calls.append(True))

        settings.set_history_size(4)

        assert calls == [True]

    def test_failed_write_keeps_previous_size(self, ini_path, monkeypatch):
        write_ini(ini_path, history_size=10)
        settings = load_settings(ini_path)
        calls = []
        settings.subscribe(lambda: calls.append(True))

        def disk_full(_parser, _path):
            raise OSError("disk full")

        monkeypatch.setattr("clipman.config._write_ini_atomic", disk_full)

        with pytest.raises(OSError):
            settings.set_history_size(3)

        assert settings.get_history_size() == 10
        assert calls == []
        assert load_settings(ini_path).get_history_size() == 10
