from __future__ import annotations

import os
from dataclasses import dataclass

import numpy as np
from PySide6.QtCore import QMimeDatabase

from png_trimmer.errors import UnsupportedTypeError
from png_trimmer.logger import get_logger
from png_trimmer.trim.models import ALPHA_BAND, BoundingBox
from png_trimmer.trim.surface import RasterSurface, VipsSurface

SUPPORTED_TYPES: tuple[str, ...] = ("image/png",)


@dataclass(frozen=True)
class RawImageFile:
    """A dropped file: base name, declared MIME type and raw bytes."""

    name: str
    mime_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: str) -> RawImageFile:
        mime = QMimeDatabase().mimeTypeForFile(path, QMimeDatabase.MatchMode.MatchExtension)
        with open(path, "rb") as f:
            data = f.read()
        return cls(name=os.path.basename(path), mime_type=mime.name() if mime.isValid() else "", data=data)


@dataclass(frozen=True)
class TrimResult:
    name: str
    data: bytes
    mime_type: str
    width: int
    height: int
    box: BoundingBox
    trimmed: bool


def find_bounding_box(pixels: np.ndarray) -> BoundingBox:
    """Return the minimal box containing every pixel with non-zero alpha.

    `pixels` is an (H, W, 4) RGBA array. Returns `BoundingBox.empty(W, H)` when
    every pixel is fully transparent.
    """
    height, width = int(pixels.shape[0]), int(pixels.shape[1])
    mask = pixels[..., ALPHA_BAND] != 0
    rows = np.flatnonzero(mask.any(axis=1))
    if rows.size == 0:
        return BoundingBox.empty(width, height)
    cols = np.flatnonzero(mask.any(axis=0))
    return BoundingBox(top=int(rows[0]), bottom=int(rows[-1]), left=int(cols[0]), right=int(cols[-1]))


def trim(file: RawImageFile, surface: RasterSurface | None = None) -> TrimResult:
    """Crop `file` to the bounding box of its non-transparent pixels.

    Fully transparent images are returned byte-for-byte without re-encoding.
    Raises UnsupportedTypeError before decoding anything when the declared type
    is not supported; decode/surface/encode failures propagate from the surface.
    """
    if file.mime_type not in SUPPORTED_TYPES:
        raise UnsupportedTypeError(file.mime_type, SUPPORTED_TYPES)

    if surface is None:
        surface = _default_surface()
    image = surface.decode(file.data)
    box = find_bounding_box(image.pixels)

    if box.is_empty:
        _logger.debug("trim: %s is fully transparent, keeping original", file.name)
        return TrimResult(
            name=file.name,
            data=file.data,
            mime_type=file.mime_type,
            width=image.width,
            height=image.height,
            box=box,
            trimmed=False,
        )

    cropped = surface.crop(image, box)
    data = surface.encode(cropped, file.mime_type)
    _logger.debug(
        "trim: %s %dx%d -> %dx%d at (%d, %d)",
        file.name,
        image.width,
        image.height,
        cropped.width,
        cropped.height,
        box.left,
        box.top,
    )
    return TrimResult(
        name=file.name,
        data=data,
        mime_type=file.mime_type,
        width=cropped.width,
        height=cropped.height,
        box=box,
        trimmed=True,
    )


_surface: VipsSurface | None = None


def _default_surface() -> VipsSurface:
    global _surface
    if _surface is None:
        _surface = VipsSurface()
    return _surface


_logger = get_logger("trim")
