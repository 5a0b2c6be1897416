"""Per-drop processing: trim each dropped file, then hand it to the download trigger."""

from __future__ import annotations

import traceback as _tb
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from png_trimmer.errors import TrimError
from png_trimmer.logger import get_logger
from png_trimmer.trim import RasterSurface, RawImageFile, TrimResult, trim

_logger = get_logger("drop_operations")

Download = Callable[[str, bytes], Path]


@dataclass
class TrimOutcome:
    """Result of processing one dropped file."""

    name: str
    result: TrimResult | None = None
    error: str | None = None
    saved_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def process_file(file: RawImageFile, surface: RasterSurface | None, download: Download) -> TrimOutcome:
    """Trim one file and download it. Failures are recorded on the outcome, not raised."""
    try:
        result = trim(file, surface)
        saved = download(file.name, result.data)
    except (TrimError, OSError) as e:
        _logger.warning("trim failed for %s: %s", file.name, e)
        _logger.debug("%s", _tb.format_exc())
        return TrimOutcome(name=file.name, error=str(e))
    return TrimOutcome(name=file.name, result=result, saved_path=saved)


def process_dropped_files(
    files: Iterable[RawImageFile], surface: RasterSurface | None, download: Download
) -> list[TrimOutcome]:
    """Process files strictly one after another; one failure does not stop the rest."""
    return [process_file(f, surface, download) for f in files]


class DropTrimWorker(QObject):
    progress = Signal(str, int, int, str)  # name, index (1-based), total, error ("" on success)
    finished = Signal(object)  # list[TrimOutcome]

    def __init__(
        self,
        files: list[RawImageFile],
        download: Download,
        surface: RasterSurface | None = None,
        failed: list[TrimOutcome] | None = None,
    ):
        super().__init__()
        self.files = files
        self.download = download
        self.surface = surface
        # Files that could not even be read are reported alongside the trimmed ones
        self.outcomes: list[TrimOutcome] = list(failed or [])

    def run(self) -> None:
        try:
            total = len(self.files)
            for idx, f in enumerate(self.files, start=1):
                outcome = process_file(f, self.surface, self.download)
                self.outcomes.append(outcome)
                self.progress.emit(f.name, idx, total, outcome.error or "")
        finally:
            self.finished.emit(self.outcomes)


def read_dropped_paths(paths: Iterable[str]) -> tuple[list[RawImageFile], list[TrimOutcome]]:
    """Load dropped paths from disk; unreadable ones become failed outcomes."""
    files: list[RawImageFile] = []
    failed: list[TrimOutcome] = []
    for p in paths:
        try:
            files.append(RawImageFile.from_path(p))
        except OSError as e:
            _logger.warning("cannot read %s: %s", p, e)
            failed.append(TrimOutcome(name=Path(p).name, error=str(e)))
    return files, failed
