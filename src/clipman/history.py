"""
History store for clipboard text.

- Ordered, most-recently-used first (index 0 = newest).
- No two entries share the same text.
- Bounded by a capacity; overflow is evicted from the tail.
- Tracks which entry mirrors the live clipboard ("active").

This module does not talk to GTK; the controller drives it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


class StaleReference(LookupError):
    """An operation referenced an entry that is no longer in the store."""


class InvalidCapacity(ValueError):
    """Capacity must be a positive integer."""


@dataclass(eq=False)
class Entry:
    # identity, not text, is what the store compares
    text: str

    def __repr__(self) -> str:
        return f"Entry(len={len(self.text)})"


@dataclass(frozen=True)
class Removal:
    evicted: Tuple[Entry, ...] = ()
    was_active: bool = False


@dataclass
class HistoryStore:
    capacity: int = 15
    _entries: List[Entry] = field(default_factory=list, init=False, repr=False)
    _active: Optional[Entry] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.capacity = self._check_capacity(self.capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def __contains__(self, entry: object) -> bool:
        return any(candidate is entry for candidate in self._entries)

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def active(self) -> Optional[Entry]:
        return self._active

    def texts(self) -> List[str]:
        return [e.text for e in self._entries]

    def find(self, text: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.text == text:
                return entry
        return None

    def promote(self, entry: Entry) -> None:
        idx = self._index_of(entry)
        if idx == 0:
            return
        del self._entries[idx]
        self._entries.insert(0, entry)

    def insert_new(self, text: str) -> Tuple[Entry, Removal]:
        """
        Insert unseen text at the front and evict from the tail if over capacity.

        Returns the new entry and what (if anything) was evicted to make room.
        """
        if self.find(text) is not None:
            raise ValueError("text already present in history")
        entry = Entry(text)
        self._entries.insert(0, entry)
        return entry, self._evict_beyond(self.capacity)

    def remove(self, entry: Entry) -> bool:
        """Delete entry; returns True if it was the active one."""
        idx = self._index_of(entry)
        del self._entries[idx]
        return self._forget_if_active(entry)

    def remove_all(self) -> bool:
        was_active = self._active is not None
        self._entries.clear()
        self._active = None
        return was_active

    def set_capacity(self, capacity: int) -> Removal:
        capacity = self._check_capacity(capacity)
        self.capacity = capacity
        return self._evict_beyond(capacity)

    def set_active(self, entry: Optional[Entry]) -> None:
        if entry is not None:
            self._index_of(entry)
        self._active = entry

    # ---- internals ----

    def _index_of(self, entry: Entry) -> int:
        for idx, candidate in enumerate(self._entries):
            if candidate is entry:
                return idx
        raise StaleReference(repr(entry))

    def _forget_if_active(self, entry: Entry) -> bool:
        if self._active is entry:
            self._active = None
            return True
        return False

    def _evict_beyond(self, limit: int) -> Removal:
        if len(self._entries) <= limit:
            return Removal()
        evicted = tuple(self._entries[limit:])
        del self._entries[limit:]
        was_active = False
        for entry in evicted:
            was_active = self._forget_if_active(entry) or was_active
        return Removal(evicted=evicted, was_active=was_active)

    @staticmethod
    def _check_capacity(capacity: object) -> int:
        # whole-number floats (2.0) are accepted as their int value
        if isinstance(capacity, float) and capacity.is_integer():
            capacity = int(capacity)
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise InvalidCapacity(f"capacity must be >= 1, got {capacity!r}")
        return capacity
