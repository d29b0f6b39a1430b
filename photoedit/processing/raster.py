"""
Raster buffer value type for PhotoEdit

A RasterBuffer wraps an RGBA8 pixel array of shape (height, width, 4).
The array is flagged read-only, so a buffer can be shared freely between
history snapshots and engine calls without copying.
"""

from typing import Iterable, Sequence, Tuple

import numpy as np

from ..errors import InvalidParameter

Pixel = Tuple[int, ...]


class RasterBuffer:
    """Immutable RGBA8 image buffer."""

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        """
        Wrap an RGBA8 array.

        Args:
            pixels: uint8 array of shape (height, width, 4)

        Raises:
            InvalidParameter: If the array is not an RGBA8 image
        """
        if not isinstance(pixels, np.ndarray):
            raise InvalidParameter(f"Expected numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidParameter(f"Expected (height, width, 4) array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InvalidParameter(f"Expected uint8 pixels, got {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidParameter(f"Buffer dimensions must be positive, got {pixels.shape[1]}x{pixels.shape[0]}")

        frozen = np.array(pixels, dtype=np.uint8, copy=True, order="C")
        frozen.setflags(write=False)
        self._pixels = frozen

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterBuffer":
        """
        Build a buffer from an RGB or RGBA array.

        RGB input gains an opaque alpha channel. Float input is expected in
        the 0-255 range and is rounded and clamped.
        """
        array = np.asarray(array)
        if array.ndim == 2:
            array = np.repeat(array[:, :, np.newaxis], 3, axis=2)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidParameter(f"Expected RGB or RGBA array, got shape {array.shape}")

        if array.dtype != np.uint8:
            array = np.clip(np.rint(array), 0, 255).astype(np.uint8)

        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)

        return cls(array)

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Iterable[Sequence[int]]) -> "RasterBuffer":
        """
        Build a buffer from row-major pixel tuples.

        Each pixel is (r, g, b) or (r, g, b, a).
        """
        rows = []
        for pixel in pixels:
            if len(pixel) == 3:
                rows.append((*pixel, 255))
            elif len(pixel) == 4:
                rows.append(tuple(pixel))
            else:
                raise InvalidParameter(f"Pixel must have 3 or 4 channels, got {pixel!r}")

        if len(rows) != width * height:
            raise InvalidParameter(f"Expected {width * height} pixels for {width}x{height}, got {len(rows)}")

        array = np.array(rows, dtype=np.int64).reshape(height, width, 4)
        if array.min() < 0 or array.max() > 255:
            raise InvalidParameter("Pixel channel values must be within 0-255")
        return cls(array.astype(np.uint8))

    @classmethod
    def blank(cls, width: int, height: int, color: Sequence[int] = (0, 0, 0, 0)) -> "RasterBuffer":
        """Create a buffer filled with a single color."""
        if width <= 0 or height <= 0:
            raise InvalidParameter(f"Buffer dimensions must be positive, got {width}x{height}")
        if len(color) == 3:
            color = (*color, 255)
        array = np.empty((height, width, 4), dtype=np.uint8)
        array[:, :] = color
        return cls(array)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the RGBA8 data."""
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    def to_array(self) -> np.ndarray:
        """Return a writable copy of the pixel data."""
        return self._pixels.copy()

    def pixel(self, x: int, y: int) -> Pixel:
        """Return the RGBA tuple at (x, y)."""
        return tuple(int(v) for v in self._pixels[y, x])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and np.array_equal(self._pixels, other._pixels)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self) -> str:
        return f"RasterBuffer({self.width}x{self.height})"
