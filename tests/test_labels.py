"""Tests for history row labels."""

import pytest

from clipman.ui.labels import menu_label


@pytest.mark.parametrize(
    "text, expected",
    [
        ("plain", "plain"),
        ("  padded  ", "␣␣padded␣␣"),
        ("\tindented", "↹indented"),
        ("line\n", "line↵"),
        ("first\nsecond", "first second"),
        ("a \t\n  b", "a b"),
        (" \n", "␣↵"),
        ("", ""),
    ],
)
def test_menu_label(text, expected):
    assert menu_label(text) == expected


def test_carriage_return_edge_collapses():
    assert menu_label("\r\nx") == " ↵x"
