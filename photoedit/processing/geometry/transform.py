"""
Rotate, flip and scale raster buffers.

The output is re-bounded to the rotated bounding box:

    new_w = w * |cos θ| + h * |sin θ|
    new_h = w * |sin θ| + h * |cos θ|

then scaled by ``transform.scale``. The source is drawn centered in the
output after rotating by θ and scaling each axis by ±scale (negative for
a flip). Pixels not covered by the source are transparent black.
"""

import logging
import math
from typing import Tuple

import cv2
import numpy as np

from ...errors import InvalidParameter
from ..raster import RasterBuffer
from .models import Transform

logger = logging.getLogger(__name__)

# Trig results this close to 0 or an integer size are snapped, so quarter
# turns produce exact dimensions and exact pixel copies.
_SNAP_EPSILON = 1e-6


def _snap(value: float) -> float:
    nearest = round(value)
    if abs(value - nearest) < _SNAP_EPSILON:
        return float(nearest)
    return value


def rotated_bounds(width: int, height: int, transform: Transform) -> Tuple[int, int]:
    """
    Output size for ``transform`` applied to a width x height buffer.

    Raises:
        InvalidParameter: If the scaled output would be empty
    """
    radians = math.radians(transform.rotate)
    sin = abs(_snap(math.sin(radians)))
    cos = abs(_snap(math.cos(radians)))

    new_width = _snap((width * cos + height * sin) * transform.scale)
    new_height = _snap((width * sin + height * cos) * transform.scale)
    out_width, out_height = int(new_width), int(new_height)

    if out_width <= 0 or out_height <= 0:
        raise InvalidParameter(
            f"Transform produces an empty {out_width}x{out_height} buffer "
            f"(source {width}x{height}, scale {transform.scale})"
        )
    return out_width, out_height


class TransformEngine:
    """Applies a Transform to a RasterBuffer with bilinear sampling."""

    def apply(self, buffer: RasterBuffer, transform: Transform) -> RasterBuffer:
        """
        Apply ``transform`` to ``buffer``.

        Args:
            buffer: Source buffer
            transform: Validated Transform

        Returns:
            New re-bounded RasterBuffer
        """
        if transform.is_identity():
            return buffer

        out_width, out_height = rotated_bounds(buffer.width, buffer.height, transform)
        matrix = self._affine_matrix(buffer.width, buffer.height, out_width, out_height, transform)

        warped = cv2.warpAffine(
            np.ascontiguousarray(buffer.pixels),
            matrix,
            (out_width, out_height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )

        logger.debug(f"Transformed {buffer.width}x{buffer.height} -> {out_width}x{out_height} "
                     f"(rotate={transform.rotate}, scale={transform.scale}, "
                     f"flip_h={transform.flip_horizontal}, flip_v={transform.flip_vertical})")
        return RasterBuffer(warped)

    @staticmethod
    def _affine_matrix(src_width: int, src_height: int, out_width: int, out_height: int,
                       transform: Transform) -> np.ndarray:
        """
        Forward 2x3 matrix from source pixel indices to output pixel indices.

        In continuous coordinates (pixel centers at +0.5):
            p_out = C_out + R(θ) · S · (p_src - C_src)
        shifted by half a pixel on both sides for OpenCV's index convention.
        """
        radians = math.radians(transform.rotate)
        sin = _snap(math.sin(radians))
        cos = _snap(math.cos(radians))

        sx = (-1 if transform.flip_horizontal else 1) * transform.scale
        sy = (-1 if transform.flip_vertical else 1) * transform.scale

        linear = np.array([[cos, -sin], [sin, cos]]) @ np.diag([sx, sy])
        src_center = np.array([src_width / 2, src_height / 2])
        out_center = np.array([out_width / 2, out_height / 2])

        offset = out_center - linear @ src_center
        offset = offset + linear @ np.array([0.5, 0.5]) - 0.5

        return np.hstack([linear, offset[:, np.newaxis]]).astype(np.float64)


def apply_transform(buffer: RasterBuffer, transform: Transform) -> RasterBuffer:
    """Apply ``transform`` to ``buffer``."""
    return TransformEngine().apply(buffer, transform)
