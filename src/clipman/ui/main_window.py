"""
Gtk4 history window for clipman.

Renders the controller's ViewModel and forwards user commands:
- search field (cleared and focused whenever the window is shown)
- one row per entry: active marker, label, delete button
- "History is Empty" placeholder
- Track Changes switch, history size spin button, Clear History button

The window never touches the HistoryStore directly.
"""

from __future__ import annotations

import gettext
import logging

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk, Gdk  # type: ignore
from gi.repository import Pango  # type: ignore

from ..config import Settings
from ..controller import ClipboardHistoryController, ViewEntry, ViewModel
from ..history import Entry
from .labels import menu_label

_ = gettext.translation("clipman", localedir=None, fallback=True).gettext

ACTIVE_MARK = "•"
MAX_HISTORY_SIZE = 500


class HistoryRow(Gtk.ListBoxRow):
    def __init__(self, item: ViewEntry, on_delete) -> None:
        super().__init__()
        self.entry: Entry = item.entry

        box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6)
        box.set_margin_start(6)
        box.set_margin_end(6)
        box.set_margin_top(2)
        box.set_margin_bottom(2)

        mark = Gtk.Label(label=ACTIVE_MARK if item.is_active else "")
        mark.set_width_chars(1)
        box.append(mark)

        label = Gtk.Label(label=menu_label(item.text))
        label.set_xalign(0.0)
        label.set_hexpand(True)
        label.set_ellipsize(Pango.EllipsizeMode.END)
        box.append(label)

        delete_btn = Gtk.Button.new_from_icon_name("edit-delete-symbolic")
        delete_btn.set_has_frame(False)
        delete_btn.set_tooltip_text(_("Delete"))
        delete_btn.connect("clicked", lambda _b: on_delete(self.entry))
        box.append(delete_btn)

        self.set_child(box)


class HistoryWindow(Gtk.ApplicationWindow):
    def __init__(self, application: Gtk.Application, controller: ClipboardHistoryController,
                 settings: Settings) -> None:
        super().__init__(application=application)
        self.set_title("Clipman")
        self.set_default_size(420, 520)
        self.set_hide_on_close(True)
        self._logger = logging.getLogger(__name__)
        self._controller = controller
        self._settings = settings
        self._syncing = False

        root = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=8)
        root.set_margin_start(12)
        root.set_margin_end(12)
        root.set_margin_top(12)
        root.set_margin_bottom(12)

        self.search = Gtk.SearchEntry(placeholder_text=_("Type to search..."))
        self.search.connect("search-changed", self._on_search_changed)
        root.append(self.search)

        # Placeholder
        self.placeholder = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=6)
        self.placeholder.set_vexpand(True)
        self.placeholder.set_valign(Gtk.Align.CENTER)
        icon = Gtk.Image.new_from_icon_name("edit-paste-symbolic")
        icon.set_pixel_size(48)
        self.placeholder.append(icon)
        self.placeholder.append(Gtk.Label(label=_("History is Empty")))
        root.append(self.placeholder)

        # History list
        self.history_list = Gtk.ListBox()
        self.history_list.set_selection_mode(Gtk.SelectionMode.NONE)
        self.history_list.set_activate_on_single_click(True)
        self.history_list.connect("row-activated", self._on_row_activated)
        self.scrolled = Gtk.ScrolledWindow()
        self.scrolled.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        self.scrolled.set_vexpand(True)
        self.scrolled.set_child(self.history_list)
        root.append(self.scrolled)

        self.notice = Gtk.Label()
        self.notice.set_xalign(0.0)
        self.notice.set_wrap(True)
        self.notice.add_css_class("warning")
        root.append(self.notice)

        root.append(Gtk.Separator(orientation=Gtk.Orientation.HORIZONTAL))

        # Track Changes
        track_row = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        track_label = Gtk.Label(label=_("Track Changes"))
        track_label.set_xalign(0.0)
        track_label.set_hexpand(True)
        track_row.append(track_label)
        self.track_switch = Gtk.Switch()
        self.track_switch.set_active(controller.tracking)
        self.track_switch.connect("notify::active", self._on_track_toggled)
        track_row.append(self.track_switch)
        root.append(track_row)

        # History size
        size_row = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        size_label = Gtk.Label(label=_("History Size"))
        size_label.set_xalign(0.0)
        size_label.set_hexpand(True)
        size_row.append(size_label)
        self.size_spin = Gtk.SpinButton.new_with_range(1, MAX_HISTORY_SIZE, 1)
        self.size_spin.connect("value-changed", self._on_size_changed)
        size_row.append(self.size_spin)
        root.append(size_row)

        self.clear_btn = Gtk.Button(label=_("Clear History"))
        self.clear_btn.connect("clicked", self._on_clear_clicked)
        root.append(self.clear_btn)

        self.set_child(root)

        keys = Gtk.EventControllerKey()
        keys.connect("key-pressed", self._on_key_pressed)
        self.add_controller(keys)

        self._sync_size_spin()
        self.render(controller.view_model)
        self._listener_id = controller.subscribe(self.render)

    # ---- Public API ----

    def toggle(self) -> None:
        if self.get_visible():
            self.set_visible(False)
        else:
            self.show_history()

    def show_history(self) -> None:
        self.search.set_text("")
        self.scrolled.get_vadjustment().set_value(0)
        self._sync_size_spin()
        self.present()
        self.search.grab_focus()

    def render(self, view: ViewModel) -> None:
        """Rebuild the list from a ViewModel snapshot."""
        self._clear_listbox()
        for item in view.entries:
            row = HistoryRow(item, self._on_delete)
            row.set_visible(item.matches)
            self.history_list.append(row)

        has_entries = not view.is_empty
        self.placeholder.set_visible(not has_entries)
        self.scrolled.set_visible(has_entries)
        self.clear_btn.set_visible(has_entries)

        self.notice.set_text(view.notice or "")
        self.notice.set_visible(bool(view.notice))

        if self.track_switch.get_active() != view.tracking:
            self._syncing = True
            try:
                self.track_switch.set_active(view.tracking)
            finally:
                self._syncing = False

    # ---- Handlers ----

    def _on_search_changed(self, entry: Gtk.SearchEntry) -> None:
        self._controller.set_search_query(entry.get_text())

    def _on_row_activated(self, _list: Gtk.ListBox, row: HistoryRow) -> None:
        self.set_visible(False)
        self._controller.select(row.entry)

    def _on_delete(self, entry: Entry) -> None:
        self._controller.delete(entry)
        if self._controller.view_model.is_empty:
            self.set_visible(False)

    def _on_clear_clicked(self, _btn: Gtk.Button) -> None:
        self.set_visible(False)
        self._controller.clear_all()

    def _on_track_toggled(self, switch: Gtk.Switch, _pspec) -> None:
        if self._syncing:
            return
        self._controller.set_tracking(switch.get_active())

    def _on_size_changed(self, spin: Gtk.SpinButton) -> None:
        if self._syncing:
            return
        try:
            self._settings.set_history_size(spin.get_value_as_int())
        except OSError as e:
            self._logger.error("Could not save history size: %s", e)

    def _on_key_pressed(self, _ctrl, keyval: int, _keycode: int, _state) -> bool:
        if keyval == Gdk.KEY_Escape:
            self.set_visible(False)
            return True
        return False

    # ---- Internals ----

    def _sync_size_spin(self) -> None:
        self._syncing = True
        try:
            self.size_spin.set_value(max(1, self._settings.get_history_size()))
        finally:
            self._syncing = False

    def _clear_listbox(self) -> None:
        child = self.history_list.get_first_child()
        while child is not None:
            self.history_list.remove(child)
            child = self.history_list.get_first_child()
