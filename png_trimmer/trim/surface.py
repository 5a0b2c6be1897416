"""Raster surfaces used by the trim engine.

A surface decodes image bytes into an RGBA `ImageBuffer`, crops a buffer to a
bounding box and encodes a buffer back into bytes. `VipsSurface` is backed by
pyvips; `MemorySurface` keeps everything in memory so the bounding-box logic
can be tested without libvips.
"""

from __future__ import annotations

import contextlib
from typing import Any, Protocol

import numpy as np

from png_trimmer.errors import DecodeError, EncodeError, SurfaceError
from png_trimmer.logger import get_logger
from png_trimmer.trim.models import ALPHA_BAND, RGBA_CHANNELS, BoundingBox, ImageBuffer

_logger = get_logger("surface")

RGB_CHANNELS = 3
GREY_ALPHA_CHANNELS = 2
_OPAQUE = 255
_OPAQUE_16 = 65535

# Save suffixes understood by pyvips.Image.write_to_buffer
_SAVE_SUFFIXES = {
    "image/png": ".png",
}


class RasterSurface(Protocol):
    def decode(self, data: bytes) -> ImageBuffer: ...

    def crop(self, buffer: ImageBuffer, box: BoundingBox) -> ImageBuffer: ...

    def encode(self, buffer: ImageBuffer, mime_type: str) -> bytes: ...


_pyvips: Any | None = None


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        try:
            import pyvips  # type: ignore
        except (ImportError, OSError) as e:
            raise SurfaceError(f"libvips is not available: {e}") from e

        # Configure pyvips caches to avoid memory growth
        with contextlib.suppress(Exception):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
        _pyvips = pyvips
    return _pyvips


class VipsSurface:
    """Surface backed by libvips."""

    def _to_rgba(self, image: Any) -> Any:
        """Normalise a decoded image to 8-bit RGBA.

        16-bit input is quantised to 8 bits before alpha is compared: colour rounds
        to nearest, alpha rounds up so any non-zero alpha stays non-zero.
        """
        pyvips = _get_pyvips_module()
        sixteen_bit = image.format == "ushort"
        if not sixteen_bit:
            with contextlib.suppress(Exception):
                image = image.colourspace("srgb")
        if image.bands == 1:
            image = pyvips.Image.bandjoin([image] * RGB_CHANNELS)
        elif image.bands == GREY_ALPHA_CHANNELS:
            grey = image.extract_band(0)
            image = pyvips.Image.bandjoin([grey, grey, grey, image.extract_band(1)])
        if image.bands == RGB_CHANNELS:
            image = image.bandjoin(_OPAQUE_16 if sixteen_bit else _OPAQUE)
        elif image.bands > RGBA_CHANNELS:
            image = image.extract_band(0, n=RGBA_CHANNELS)
        if sixteen_bit:
            colour = (image.extract_band(0, n=RGB_CHANNELS) / 257).rint()
            alpha = (image.extract_band(ALPHA_BAND) / 257).ceil()
            image = colour.bandjoin(alpha)
        if image.format != "uchar":
            image = image.cast("uchar")
        return image

    def decode(self, data: bytes) -> ImageBuffer:
        pyvips = _get_pyvips_module()
        try:
            image = pyvips.Image.new_from_buffer(bytes(data), "", access="sequential")
            image = self._to_rgba(image)
            width, height = image.width, image.height
            if width <= 0 or height <= 0:
                raise DecodeError(f"image has no pixels ({width}x{height})")
            mem = image.write_to_memory()
        except pyvips.Error as e:
            _logger.debug("decode failed: %s", e)
            raise DecodeError(f"cannot decode image: {e}") from e

        array = np.frombuffer(mem, dtype=np.uint8).reshape(height, width, RGBA_CHANNELS)
        return ImageBuffer(array.copy())

    def crop(self, buffer: ImageBuffer, box: BoundingBox) -> ImageBuffer:
        return buffer.crop(box)

    def encode(self, buffer: ImageBuffer, mime_type: str) -> bytes:
        pyvips = _get_pyvips_module()
        suffix = _SAVE_SUFFIXES.get(mime_type)
        if suffix is None:
            raise EncodeError(f"no encoder for {mime_type}")
        try:
            image = pyvips.Image.new_from_memory(
                buffer.pixels.tobytes(), buffer.width, buffer.height, RGBA_CHANNELS, "uchar"
            )
            image = image.copy(interpretation="srgb")
            return bytes(image.write_to_buffer(suffix))
        except pyvips.Error as e:
            _logger.debug("encode failed: %s", e)
            raise EncodeError(f"cannot encode {mime_type}: {e}") from e


class MemorySurface:
    """In-memory surface for tests.

    Byte payloads are registered against RGBA arrays; `encode` hands out a new
    payload and remembers its pixels, so encoded output can be decoded again.
    """

    def __init__(self) -> None:
        self._images: dict[bytes, np.ndarray] = {}
        self.encoded: list[tuple[ImageBuffer, str]] = []
        self.decode_calls = 0
        self.fail_acquire = False
        self.fail_encode = False

    def register(self, data: bytes, pixels: np.ndarray) -> bytes:
        self._images[bytes(data)] = ImageBuffer(np.asarray(pixels, dtype=np.uint8)).pixels.copy()
        return bytes(data)

    def pixels_for(self, data: bytes) -> np.ndarray:
        return self._images[bytes(data)]

    def decode(self, data: bytes) -> ImageBuffer:
        self.decode_calls += 1
        if self.fail_acquire:
            raise SurfaceError("memory surface unavailable")
        pixels = self._images.get(bytes(data))
        if pixels is None:
            raise DecodeError("unknown image payload")
        return ImageBuffer(pixels.copy())

    def crop(self, buffer: ImageBuffer, box: BoundingBox) -> ImageBuffer:
        if self.fail_acquire:
            raise SurfaceError("memory surface unavailable")
        return buffer.crop(box)

    def encode(self, buffer: ImageBuffer, mime_type: str) -> bytes:
        if self.fail_encode:
            raise EncodeError(f"cannot encode {mime_type}")
        token = f"memory:{len(self.encoded)}:{mime_type}".encode()
        self._images[token] = buffer.pixels.copy()
        self.encoded.append((buffer, mime_type))
        return token
