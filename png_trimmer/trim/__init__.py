"""Trim package public API.

Expose the pure-backend trim engine and its raster surfaces as `png_trimmer.trim`.
"""

from png_trimmer.trim.models import BoundingBox, ImageBuffer
from png_trimmer.trim.surface import MemorySurface, RasterSurface, VipsSurface
from png_trimmer.trim.trim import SUPPORTED_TYPES, RawImageFile, TrimResult, find_bounding_box, trim

__all__ = [
    "SUPPORTED_TYPES",
    "BoundingBox",
    "ImageBuffer",
    "MemorySurface",
    "RasterSurface",
    "RawImageFile",
    "TrimResult",
    "VipsSurface",
    "find_bounding_box",
    "trim",
]
