"""Write trimmed bytes into the download directory."""

from __future__ import annotations

import os
from pathlib import Path

from png_trimmer.logger import get_logger

_logger = get_logger("download")


def default_download_dir() -> str:
    """~/Downloads when present, otherwise the home directory."""
    home = Path.home()
    downloads = home / "Downloads"
    return str(downloads if downloads.is_dir() else home)


def unique_path(directory: Path, name: str) -> Path:
    """Return `directory/name`, or `name (1).ext`, `name (2).ext`... if taken."""
    candidate = directory / name
    if not candidate.exists():
        return candidate
    stem, ext = os.path.splitext(name)
    n = 1
    while True:
        candidate = directory / f"{stem} ({n}){ext}"
        if not candidate.exists():
            return candidate
        n += 1


class DownloadTrigger:
    """Save `data` under the original file's base name without overwriting."""

    def __init__(self, directory: str | os.PathLike[str]):
        self.directory = Path(directory)

    def __call__(self, name: str, data: bytes) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        out_path = unique_path(self.directory, os.path.basename(name) or "image.png")
        with open(out_path, "xb") as f:
            f.write(data)
        _logger.debug("saved %s (%d bytes)", out_path, len(data))
        return out_path
