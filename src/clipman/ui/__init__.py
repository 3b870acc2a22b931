"""UI package for clipman.

The GTK window lives in clipman.ui.main_window and is imported explicitly by
the application so that the GTK-free helpers here stay importable on their own.
"""
from .labels import menu_label

__all__ = ["menu_label"]
