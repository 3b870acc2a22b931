"""
ClipboardHistoryController: glue between the clipboard backend, the settings
and the HistoryStore.

- Records new clipboard text (when tracking is on) or promotes a known entry.
- Keeps the active entry in sync with the live clipboard.
- Applies history-size changes, clearing the clipboard if the active entry is evicted.
- Publishes an immutable ViewModel snapshot to subscribers after every change.

Everything runs on one (GLib) main loop; clipboard reads are asynchronous, so
text arriving from the backend is always re-matched against the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

from .history import Entry, HistoryStore, InvalidCapacity, StaleReference


logger = logging.getLogger(__name__)


class BackendUnavailable(RuntimeError):
    """A required collaborator (clipboard or settings) is missing."""


class ClipboardBackend(Protocol):
    def subscribe(self, on_change: Callable[[], None]) -> int: ...

    def unsubscribe(self, handler_id: int) -> None: ...

    def get_text(self, callback: Callable[[Optional[str]], None]) -> None: ...

    def set_text(self, text: str) -> None: ...

    def clear_text(self) -> None: ...


class SettingsSource(Protocol):
    def get_history_size(self) -> int: ...

    def subscribe(self, on_history_size_changed: Callable[[], None]) -> int: ...

    def unsubscribe(self, handler_id: int) -> None: ...


@dataclass(frozen=True)
class ViewEntry:
    entry: Entry
    text: str
    is_active: bool
    matches: bool


@dataclass(frozen=True)
class ViewModel:
    entries: Tuple[ViewEntry, ...] = ()
    tracking: bool = True
    query: str = ""
    notice: Optional[str] = None

    @property
    def active_index(self) -> Optional[int]:
        for idx, item in enumerate(self.entries):
            if item.is_active:
                return idx
        return None

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def texts(self) -> list[str]:
        return [item.text for item in self.entries]


def matches_query(text: str, query: str) -> bool:
    """Case-insensitive substring match; an empty query matches everything."""
    return query.lower() in text.lower()


ViewListener = Callable[[ViewModel], None]


class ClipboardHistoryController:
    def __init__(self, backend: Optional[ClipboardBackend], settings: Optional[SettingsSource]) -> None:
        if backend is None:
            raise BackendUnavailable("clipboard backend not available")
        if settings is None:
            raise BackendUnavailable("settings not available")

        self._backend = backend
        self._settings = settings
        self._tracking = True
        self._query = ""
        self._notice: Optional[str] = None
        self._listeners: Dict[int, ViewListener] = {}
        self._next_listener_id = 1
        self._destroyed = False

        requested = settings.get_history_size()
        try:
            self._store = HistoryStore(capacity=requested)
        except InvalidCapacity:
            self._store = HistoryStore(capacity=1)
            self._warn_clamped(requested)
        self._view = self._build_view()

        self._backend_handler = backend.subscribe(self._on_clipboard_changed)
        self._settings_handler = settings.subscribe(self._on_history_size_changed)

    # ---- Read-only state ----

    @property
    def store(self) -> HistoryStore:
        return self._store

    @property
    def tracking(self) -> bool:
        return self._tracking

    @property
    def view_model(self) -> ViewModel:
        return self._view

    # ---- Subscriptions ----

    def subscribe(self, listener: ViewListener) -> int:
        listener_id = self._next_listener_id
        self._next_listener_id += 1
        self._listeners[listener_id] = listener
        return listener_id

    def unsubscribe(self, listener_id: int) -> None:
        self._listeners.pop(listener_id, None)

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        self._backend.unsubscribe(self._backend_handler)
        self._settings.unsubscribe(self._settings_handler)
        self._listeners.clear()

    # ---- Clipboard notifications ----

    def _on_clipboard_changed(self) -> None:
        if self._destroyed:
            return
        self._backend.get_text(self._on_text_read)

    def _on_text_read(self, text: Optional[str]) -> None:
        if self._destroyed:
            logger.debug("Dropping clipboard text that arrived after shutdown")
            return
        self.on_clipboard_text_observed(text)

    def on_clipboard_text_observed(self, text: Optional[str]) -> None:
        # cleared clipboard or non-text content: keep history and active entry as they are
        if not text:
            return

        entry = self._store.find(text)
        if entry is not None:
            self._store.promote(entry)
            self._store.set_active(entry)
            logger.debug("Promoted history entry (%d chars)", len(text))
        elif self._tracking:
            entry, removal = self._store.insert_new(text)
            if removal.evicted:
                logger.debug("Evicted %d history entries", len(removal.evicted))
            self._store.set_active(None if removal.was_active else entry)
            logger.debug("Recorded history entry (%d chars)", len(text))
        else:
            self._store.set_active(None)
        self._emit()

    # ---- User commands ----

    def select(self, entry: Entry) -> None:
        """Write entry back to the clipboard; the change notification re-promotes it."""
        if entry not in self._store:
            logger.warning("Ignoring select of stale entry %r", entry)
            return
        self._backend.set_text(entry.text)

    def delete(self, entry: Entry) -> None:
        try:
            was_active = self._store.remove(entry)
        except StaleReference:
            logger.warning("Ignoring delete of stale entry %r", entry)
            return
        if was_active:
            self._backend.clear_text()
        self._emit()

    def clear_all(self) -> None:
        if self._store.remove_all():
            self._backend.clear_text()
        self._emit()

    def set_tracking(self, enabled: bool) -> None:
        self._tracking = bool(enabled)
        logger.info("Tracking %s", "enabled" if self._tracking else "disabled")
        self._emit()

    def set_search_query(self, query: Optional[str]) -> None:
        self._query = query or ""
        self._emit()

    # ---- Settings ----

    def _on_history_size_changed(self) -> None:
        if self._destroyed:
            return
        self.on_capacity_changed(self._settings.get_history_size())

    def on_capacity_changed(self, capacity: int) -> None:
        try:
            removal = self._store.set_capacity(capacity)
            self._notice = None
        except InvalidCapacity:
            removal = self._store.set_capacity(1)
            self._warn_clamped(capacity)
        if removal.evicted:
            logger.debug("Capacity %d evicted %d entries", self._store.capacity, len(removal.evicted))
        if removal.was_active:
            self._backend.clear_text()
        self._emit()

    # ---- Internals ----

    def _warn_clamped(self, requested: object) -> None:
        logger.warning("Invalid history size %r, using 1", requested)
        self._notice = f"History size {requested!r} is invalid; using 1"

    def _build_view(self) -> ViewModel:
        active = self._store.active
        items = tuple(
            ViewEntry(
                entry=entry,
                text=entry.text,
                is_active=entry is active,
                matches=matches_query(entry.text, self._query),
            )
            for entry in self._store.entries
        )
        return ViewModel(entries=items, tracking=self._tracking, query=self._query, notice=self._notice)

    def _emit(self) -> None:
        self._view = self._build_view()
        for listener in list(self._listeners.values()):
            try:
                listener(self._view)
            except Exception:
                logger.exception("View-model listener failed")
