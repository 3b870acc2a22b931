import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

# Add the src directory to the path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from clipman.controller import ClipboardHistoryController  # noqa: E402


class FakeClipboard:
    """In-memory clipboard backend; get_text callbacks are queued until flush()."""

    def __init__(self) -> None:
        self.text: Optional[str] = None
        self.listeners: Dict[int, Callable[[], None]] = {}
        self.pending: List[Callable[[Optional[str]], None]] = []
        self.set_calls: List[str] = []
        self.clear_calls = 0
        self._next_id = 1

    def subscribe(self, on_change):
        handler_id = self._next_id
        self._next_id += 1
        self.listeners[handler_id] = on_change
        return handler_id

    def unsubscribe(self, handler_id):
        self.listeners.pop(handler_id, None)

    def get_text(self, callback):
        self.pending.append(callback)

    def set_text(self, text):
        self.set_calls.append(text)
        self.text = text
        self.changed()

    def clear_text(self):
        self.clear_calls += 1
        self.text = None
        self.changed()

    # test helpers

    def changed(self) -> None:
        for listener in list(self.listeners.values()):
            listener()

    def copy(self, text: Optional[str]) -> None:
        """Simulate another application writing the clipboard and the read completing."""
        self.text = text
        self.changed()
        self.flush()

    def flush(self) -> None:
        pending, self.pending = self.pending, []
        for callback in pending:
            callback(self.text)


class FakeSettings:
    def __init__(self, history_size: int = 15) -> None:
        self.history_size = history_size
        self.listeners: Dict[int, Callable[[], None]] = {}
        self._next_id = 1

    def get_history_size(self) -> int:
        return self.history_size

    def subscribe(self, on_history_size_changed):
        handler_id = self._next_id
        self._next_id += 1
        self.listeners[handler_id] = on_history_size_changed
        return handler_id

    def unsubscribe(self, handler_id):
        self.listeners.pop(handler_id, None)

    def change(self, history_size: int) -> None:
        self.history_size = history_size
        for listener in list(self.listeners.values()):
            listener()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def settings() -> FakeSettings:
    return FakeSettings()


@pytest.fixture
def make_controller(clipboard, settings):
    """Build a controller wired to the fakes; optional history size."""
    created = []

    def _make(history_size: Optional[int] = None) -> ClipboardHistoryController:
        if history_size is not None:
            settings.history_size = history_size
        controller = ClipboardHistoryController(clipboard, settings)
        created.append(controller)
        return controller

    yield _make
    for controller in created:
        controller.destroy()
