"""Display-only text helpers for history rows (no GTK)."""

from __future__ import annotations

import re


_EDGE_WHITESPACE = re.compile(r"^\s+|\s+\Z")
_INNER_WHITESPACE = re.compile(r"\s+")

_VISIBLE = str.maketrans({" ": "␣", "\t": "↹", "\n": "↵"})


def menu_label(text: str) -> str:
    """
    One-line label for a history entry.

    Leading/trailing spaces, tabs and newlines become visible symbols
    (␣ ↹ ↵); any other whitespace run collapses to a single space.
    """
    marked = _EDGE_WHITESPACE.sub(lambda m: m.group(0).translate(_VISIBLE), text)
    return _INNER_WHITESPACE.sub(" ", marked)
