"""
Resizing helpers used by the preview generator.
"""

import logging
from typing import Tuple

import cv2
import numpy as np

from ...errors import InvalidParameter
from ..raster import RasterBuffer

logger = logging.getLogger(__name__)


def fit_dimensions(width: int, height: int, max_width: int, max_height: int,
                   maintain_aspect_ratio: bool = True) -> Tuple[int, int]:
    """
    Target size for a resize.

    With the aspect ratio kept the image is scaled by
    min(max_width / width, max_height / height), which can also enlarge it.
    Sizes are truncated to integers and never drop below 1.
    """
    if max_width <= 0 or max_height <= 0:
        raise InvalidParameter(f"Resize target must be positive, got {max_width}x{max_height}")

    if not maintain_aspect_ratio:
        return int(max_width), int(max_height)

    ratio = min(max_width / width, max_height / height)
    return max(1, int(width * ratio)), max(1, int(height * ratio))


def resize_image(buffer: RasterBuffer, max_width: int, max_height: int,
                 maintain_aspect_ratio: bool = True) -> RasterBuffer:
    """
    Resize ``buffer`` into a max_width x max_height box.

    Args:
        buffer: Source buffer
        max_width: Target width (or bounding width with aspect kept)
        max_height: Target height (or bounding height with aspect kept)
        maintain_aspect_ratio: Keep the source proportions

    Returns:
        New RasterBuffer
    """
    new_width, new_height = fit_dimensions(buffer.width, buffer.height,
                                           max_width, max_height, maintain_aspect_ratio)
    if (new_width, new_height) == buffer.size:
        return buffer

    # Area averaging for reduction, bicubic for enlargement
    shrinking = new_width * new_height < buffer.width * buffer.height
    interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC

    resized = cv2.resize(np.ascontiguousarray(buffer.pixels), (new_width, new_height),
                         interpolation=interpolation)
    logger.debug(f"Resized {buffer.width}x{buffer.height} -> {new_width}x{new_height}")
    return RasterBuffer(resized)


def image_dimensions(buffer: RasterBuffer) -> Tuple[int, int]:
    """(width, height) of ``buffer``."""
    return buffer.width, buffer.height
