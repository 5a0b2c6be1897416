import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMainWindow

from png_trimmer.logger import get_logger
from png_trimmer.ops.download import DownloadTrigger
from png_trimmer.settings_manager import SettingsManager
from png_trimmer.state.drop_state import DropState
from png_trimmer.trim import RasterSurface
from png_trimmer.ui_drop_area import DropArea

logger = get_logger("main")
_BASE_DIR = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent))


# --- CLI logging options -----------------------------------------------------
# Parse our own options before Qt sees argv, reflect them in environment
# variables (PNG_TRIMMER_LOG_LEVEL, PNG_TRIMMER_LOG_CATS), and drop them.


def _apply_cli_logging_options(argv: list[str]) -> list[str]:
    import argparse
    import os

    parser = argparse.ArgumentParser(description="PNG Trimmer", add_help=False)
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    args, remaining = parser.parse_known_args(argv[1:])
    if args.log_level:
        os.environ["PNG_TRIMMER_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["PNG_TRIMMER_LOG_CATS"] = args.log_cats
    # Re-read env so the new level/categories apply to the already-created logger
    get_logger()
    return [argv[0], *remaining]


class TrimmerWindow(QMainWindow):
    def __init__(
        self,
        settings_path: str | None = None,
        download_dir: str | None = None,
        surface: RasterSurface | None = None,
    ):
        super().__init__()
        self.setWindowTitle("PNG Trimmer")

        self._settings_path = settings_path or (_BASE_DIR / "settings.json").as_posix()
        self._settings_manager = SettingsManager(self._settings_path)
        self.download_dir = download_dir or self._settings_manager.download_dir
        logger.debug("download dir: %s", self.download_dir)

        self.drop_state = DropState(self)
        self.drop_area = DropArea(self.drop_state, DownloadTrigger(self.download_dir), surface=surface, parent=self)
        self.setCentralWidget(self.drop_area)

        self.resize(*self._settings_manager.window_size())

    def closeEvent(self, event):
        self._settings_manager.set("window_width", self.width())
        self._settings_manager.set("window_height", self.height())
        super().closeEvent(event)


def run(argv: list[str] | None = None) -> int:
    """Application entrypoint (packaging-friendly)."""
    import argparse

    if argv is None:
        argv = sys.argv
    argv = _apply_cli_logging_options(list(argv))

    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--download-dir", help="Directory trimmed images are saved to")
    args, qt_args = parser.parse_known_args(argv[1:])

    app = QApplication.instance() or QApplication([argv[0], *qt_args])
    window = TrimmerWindow(download_dir=args.download_dir)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
