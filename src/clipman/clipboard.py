"""
GdkClipboardBackend: clipboard access for the history controller via GTK4/GDK.

- Change notification from the Gdk.Clipboard "changed" signal.
- Optional polling (GLib.timeout_add) because under Wayland an unfocused
  window is not told about clipboard changes made by other clients. Polling
  only notifies when the text differs from the last polled text.
- Reads are asynchronous (read_text_async); failures and non-text content
  deliver None.

Intended use:
    backend = GdkClipboardBackend(poll_interval_ms=500)
    handler_id = backend.subscribe(on_change)
    backend.get_text(lambda text: ...)
    ...
    backend.destroy()
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

import gi
gi.require_version("Gdk", "4.0")
gi.require_version("GLib", "2.0")
from gi.repository import Gdk, GLib  # type: ignore

from .controller import BackendUnavailable


logger = logging.getLogger(__name__)

MIN_POLL_INTERVAL_MS = 50


class GdkClipboardBackend:
    def __init__(self, which: str = "clipboard", poll_interval_ms: int = 0, display: Optional[object] = None) -> None:
        display = display or Gdk.Display.get_default()
        if display is None:
            raise BackendUnavailable("no GDK display available")

        self._which = "primary" if (which or "").lower() == "primary" else "clipboard"
        if self._which == "primary":
            self._clipboard = display.get_primary_clipboard()  # type: ignore[attr-defined]
        else:
            self._clipboard = display.get_clipboard()  # type: ignore[attr-defined]

        self._listeners: Dict[int, Callable[[], None]] = {}
        self._next_id = 1
        self._signal_id = self._clipboard.connect("changed", self._on_owner_changed)

        self._poll_source: Optional[int] = None
        self._polling_read = False
        self._last_polled: Optional[str] = None
        if poll_interval_ms > 0:
            interval = max(MIN_POLL_INTERVAL_MS, int(poll_interval_ms))
            self._poll_source = GLib.timeout_add(interval, self._tick)  # type: ignore
            logger.debug("Polling %s every %d ms", self._which, interval)

    # ---- Backend contract ----

    def subscribe(self, on_change: Callable[[], None]) -> int:
        handler_id = self._next_id
        self._next_id += 1
        self._listeners[handler_id] = on_change
        return handler_id

    def unsubscribe(self, handler_id: int) -> None:
        self._listeners.pop(handler_id, None)

    def get_text(self, callback: Callable[[Optional[str]], None]) -> None:
        self._clipboard.read_text_async(None, self._on_read, callback)  # type: ignore[arg-type]

    def set_text(self, text: str) -> None:
        self._clipboard.set(text)  # type: ignore[attr-defined]

    def clear_text(self) -> None:
        self._clipboard.set_content(None)  # type: ignore[attr-defined]
        # the same text copied again after a clear is a change
        self._last_polled = None

    def destroy(self) -> None:
        if self._poll_source is not None:
            GLib.source_remove(self._poll_source)  # type: ignore
            self._poll_source = None
        if self._signal_id:
            self._clipboard.disconnect(self._signal_id)
            self._signal_id = 0
        self._listeners.clear()

    # ---- Internals ----

    def _on_owner_changed(self, _clipboard) -> None:
        self._notify()

    def _on_read(self, source, res, callback: Callable[[Optional[str]], None]) -> None:
        try:
            text = source.read_text_finish(res)
        except GLib.Error as e:  # type: ignore[misc]
            logger.debug("Clipboard read failed: %s", e.message)
            text = None
        callback(text or None)

    def _tick(self) -> bool:
        if not self._polling_read:
            self._polling_read = True
            self.get_text(self._on_poll_read)
        return True

    def _on_poll_read(self, text: Optional[str]) -> None:
        self._polling_read = False
        changed = text != self._last_polled
        self._last_polled = text
        if text and changed:
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener()
            except Exception:
                logger.exception("Clipboard listener failed")
