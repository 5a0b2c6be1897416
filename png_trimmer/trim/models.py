from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# Image channel constants
RGBA_CHANNELS = 4
_EXPECTED_NDIM = 3
ALPHA_BAND = 3


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive pixel rectangle (top, bottom, left, right).

    A box with top > bottom (equivalently left > right) is empty: no opaque pixel was found.
    """

    top: int
    bottom: int
    left: int
    right: int

    @classmethod
    def empty(cls, width: int, height: int) -> BoundingBox:
        return cls(top=height, bottom=0, left=width, right=0)

    @property
    def is_empty(self) -> bool:
        return self.top > self.bottom or self.left > self.right

    @property
    def width(self) -> int:
        return 0 if self.is_empty else self.right - self.left + 1

    @property
    def height(self) -> int:
        return 0 if self.is_empty else self.bottom - self.top + 1


@dataclass
class ImageBuffer:
    """Decoded RGBA raster, pixels shaped (height, width, 4) uint8."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = np.asarray(self.pixels)
        if arr.ndim != _EXPECTED_NDIM or arr.shape[2] != RGBA_CHANNELS:
            raise ValueError(f"expected (H, W, 4) RGBA array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            raise ValueError(f"expected uint8 pixels, got {arr.dtype}")
        self.pixels = np.ascontiguousarray(arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[..., ALPHA_BAND]

    def crop(self, box: BoundingBox) -> ImageBuffer:
        """Copy the inclusive rectangle of `box` into a new buffer at origin (0, 0)."""
        if box.is_empty:
            raise ValueError("cannot crop to an empty bounding box")
        if box.left < 0 or box.top < 0 or box.right >= self.width or box.bottom >= self.height:
            raise ValueError(f"bounding box {box} outside {self.width}x{self.height} image")
        region = self.pixels[box.top : box.bottom + 1, box.left : box.right + 1]
        return ImageBuffer(region.copy())
