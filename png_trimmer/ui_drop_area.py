from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QDragEnterEvent, QDragLeaveEvent, QDragMoveEvent, QDropEvent, QFont
from PySide6.QtWidgets import QLabel, QMessageBox, QWidget

from png_trimmer.busy_cursor import busy_cursor
from png_trimmer.logger import get_logger
from png_trimmer.ops.drop_operations import Download, DropTrimWorker, TrimOutcome, read_dropped_paths
from png_trimmer.state.drop_state import DropState
from png_trimmer.trim import RasterSurface

_logger = get_logger("ui_drop_area")


class DropArea(QLabel):
    """Label that accepts dropped files and mirrors the drop state message."""

    def __init__(
        self,
        state: DropState,
        download: Download,
        surface: RasterSurface | None = None,
        parent: QWidget | None = None,
    ):
        super().__init__(state.message, parent)
        self.state = state
        self.download = download
        self.surface = surface
        self.last_outcomes: list[TrimOutcome] = []

        self.setAcceptDrops(True)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = QFont()
        font.setPointSize(18)
        self.setFont(font)
        self.state.messageChanged.connect(self.setText)

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:  # type: ignore[override]
        self._accept_drag(event)

    def dragMoveEvent(self, event: QDragMoveEvent) -> None:  # type: ignore[override]
        self._accept_drag(event)

    def dragLeaveEvent(self, event: QDragLeaveEvent) -> None:  # type: ignore[override]
        self.state.drag_leave()
        event.accept()

    def dropEvent(self, event: QDropEvent) -> None:  # type: ignore[override]
        mime = event.mimeData()
        paths = [u.toLocalFile() for u in mime.urls() if u.isLocalFile()] if mime.hasUrls() else []
        event.acceptProposedAction()
        self.handle_files(paths)

    def _accept_drag(self, event) -> None:
        self.state.drag_over()
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def handle_files(self, paths: list[str]) -> list[TrimOutcome]:
        """Trim and download each path in order, then resolve the drop state."""
        files, unreadable = read_dropped_paths(paths)
        worker = DropTrimWorker(files, self.download, surface=self.surface, failed=unreadable)

        def _on_progress(name: str, index: int, total: int, error: str):
            _logger.debug("drop: %s (%d/%d) %s", name, index, total, error)

        worker.progress.connect(_on_progress)
        with busy_cursor():
            worker.run()

        self.last_outcomes = worker.outcomes
        self.state.drop_finished(self.last_outcomes)
        failed = [o for o in self.last_outcomes if not o.ok]
        if failed:
            lines = "\n".join(f"{o.name}: {o.error}" for o in failed)
            QMessageBox.warning(self, "Trim Error", f"Failed to trim {len(failed)} file(s):\n{lines}")
        return self.last_outcomes
