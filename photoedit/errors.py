"""
Exception hierarchy for PhotoEdit.

Engine operations either return a complete new buffer or raise one of these
before any pixel work is done.
"""


class PhotoEditError(Exception):
    """Base class for all PhotoEdit errors."""


class InvalidParameter(PhotoEditError, ValueError):
    """Raised for out-of-range adjustments, bad geometry or bad crop rectangles."""


class UnknownPreset(PhotoEditError, KeyError):
    """Raised when a filter preset id is required but not registered."""

    def __init__(self, filter_id: str):
        super().__init__(filter_id)
        self.filter_id = filter_id

    def __str__(self) -> str:
        return f"Unknown filter preset: {self.filter_id!r}"


class DecodeError(PhotoEditError):
    """Raised by the I/O layer when an image cannot be decoded."""


class EncodeError(PhotoEditError):
    """Raised by the I/O layer when an image cannot be encoded."""
