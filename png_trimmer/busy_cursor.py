"""Busy cursor context manager for processing a drop."""

from contextlib import contextmanager

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication


@contextmanager
def busy_cursor():
    """Show the wait cursor while the block runs; restored even if it raises."""
    try:
        QApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        QApplication.processEvents()  # Immediately reflect cursor change
        yield
    finally:
        QApplication.restoreOverrideCursor()
