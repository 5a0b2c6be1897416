from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from png_trimmer.ops.download import DownloadTrigger
from png_trimmer.ops.drop_operations import DropTrimWorker, process_dropped_files, read_dropped_paths
from png_trimmer.trim import MemorySurface, RawImageFile


def _surface_with_files() -> tuple[MemorySurface, list[RawImageFile]]:
    surface = MemorySurface()
    pixels = np.zeros((4, 4, 4), dtype=np.uint8)
    pixels[1:3, 1:3, 3] = 255
    good = RawImageFile("one.png", "image/png", surface.register(b"one", pixels))
    bad_type = RawImageFile("two.jpg", "image/jpeg", b"jpeg")
    broken = RawImageFile("three.png", "image/png", b"unknown")
    blank = RawImageFile("four.png", "image/png", surface.register(b"four", np.zeros((2, 2, 4), dtype=np.uint8)))
    return surface, [good, bad_type, broken, blank]


def test_files_processed_in_order_and_failures_do_not_stop_batch():
    surface, files = _surface_with_files()
    calls: list[str] = []

    def download(name: str, data: bytes) -> Path:
        calls.append(name)
        return Path("/downloads") / name

    outcomes = process_dropped_files(files, surface, download)

    assert [o.name for o in outcomes] == ["one.png", "two.jpg", "three.png", "four.png"]
    assert [o.ok for o in outcomes] == [True, False, False, True]
    assert calls == ["one.png", "four.png"]
    assert "image/png" in outcomes[1].error
    assert outcomes[0].result.width == 2
    assert outcomes[3].result.data == b"four"
    assert outcomes[3].saved_path == Path("/downloads/four.png")


def test_download_error_is_recorded(tmp_path):
    surface, files = _surface_with_files()

    def download(name: str, data: bytes) -> Path:
        raise PermissionError("read-only")

    outcomes = process_dropped_files(files[:1], surface, download)

    assert not outcomes[0].ok
    assert "read-only" in outcomes[0].error


def test_worker_emits_progress_and_finished(tmp_path):
    surface, files = _surface_with_files()
    worker = DropTrimWorker(files, DownloadTrigger(tmp_path), surface=surface)
    progress: list[tuple[str, int, int, str]] = []
    finished: list[list] = []
    worker.progress.connect(lambda *a: progress.append(a))
    worker.finished.connect(finished.append)

    worker.run()

    assert [(p[0], p[1], p[2]) for p in progress] == [
        ("one.png", 1, 4),
        ("two.jpg", 2, 4),
        ("three.png", 3, 4),
        ("four.png", 4, 4),
    ]
    assert progress[0][3] == ""
    assert progress[1][3]
    assert len(finished) == 1 and len(finished[0]) == 4
    assert sorted(p.name for p in tmp_path.iterdir()) == ["four.png", "one.png"]


def test_read_dropped_paths_reports_unreadable(tmp_path):
    ok = tmp_path / "here.png"
    ok.write_bytes(b"data")

    files, failed = read_dropped_paths([str(ok), str(tmp_path / "missing.png")])

    assert [f.name for f in files] == ["here.png"]
    assert files[0].mime_type == "image/png"
    assert files[0].data == b"data"
    assert [o.name for o in failed] == ["missing.png"]
    assert not failed[0].ok


def test_worker_prepends_unreadable_outcomes(tmp_path):
    surface, files = _surface_with_files()
    _, failed = read_dropped_paths([str(tmp_path / "gone.png")])
    worker = DropTrimWorker(files[:1], DownloadTrigger(tmp_path), surface=surface, failed=failed)

    worker.run()

    assert [o.name for o in worker.outcomes] == ["gone.png", "one.png"]


def test_worker_emits_finished_when_processing_raises():
    surface, files = _surface_with_files()
    finished: list[list] = []

    def download(name: str, data: bytes) -> Path:
        if name == "four.png":
            raise RuntimeError("disk vanished")
        return Path("/downloads") / name

    worker = DropTrimWorker([files[0], files[3]], download, surface=surface)
    worker.finished.connect(finished.append)

    with pytest.raises(RuntimeError, match="disk vanished"):
        worker.run()

    assert len(finished) == 1
    assert [o.name for o in finished[0]] == ["one.png"]
