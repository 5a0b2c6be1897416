"""Errors raised while trimming a single dropped file."""

from __future__ import annotations


class TrimError(Exception):
    """Base class for per-file trim failures."""


class UnsupportedTypeError(TrimError):
    def __init__(self, mime_type: str, supported: tuple[str, ...]):
        self.mime_type = mime_type
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported file type: {mime_type or 'unknown'}. Supported types: {','.join(self.supported)}"
        )


class DecodeError(TrimError):
    """Image bytes are malformed or unreadable."""


class SurfaceError(TrimError):
    """The raster surface could not be acquired."""


class EncodeError(TrimError):
    """Re-encoding the trimmed raster failed."""
