"""
Rectangular crop extraction.
"""

import logging
from typing import Optional

from ...errors import InvalidParameter
from ..raster import RasterBuffer
from .models import CropArea

logger = logging.getLogger(__name__)

# Fraction of each dimension covered by the default crop box
DEFAULT_CROP_FRACTION = 0.8


def validate_crop(crop: CropArea, width: int, height: int) -> None:
    """
    Check ``crop`` against a width x height source.

    Raises:
        InvalidParameter: If the rectangle leaves the source bounds
    """
    if not crop.fits_within(width, height):
        raise InvalidParameter(
            f"Crop ({crop.x}, {crop.y}, {crop.width}x{crop.height}) exceeds "
            f"source bounds {width}x{height}"
        )


def crop_image(buffer: RasterBuffer, crop: CropArea) -> RasterBuffer:
    """
    Extract ``crop.width`` x ``crop.height`` pixels starting at (crop.x, crop.y).

    Args:
        buffer: Source buffer
        crop: Rectangle inside the source bounds

    Returns:
        New RasterBuffer

    Raises:
        InvalidParameter: If the rectangle exceeds the source bounds
    """
    validate_crop(crop, buffer.width, buffer.height)

    if crop.x == 0 and crop.y == 0 and crop.width == buffer.width and crop.height == buffer.height:
        return buffer

    region = buffer.pixels[crop.y:crop.bottom, crop.x:crop.right]
    logger.debug(f"Cropped {buffer.width}x{buffer.height} to {crop.width}x{crop.height} "
                 f"at ({crop.x}, {crop.y})")
    return RasterBuffer(region)


def centered_crop(width: int, height: int, aspect_ratio: Optional[float] = None,
                  fraction: float = DEFAULT_CROP_FRACTION) -> CropArea:
    """
    Suggest a centered crop box for a width x height buffer.

    The box covers ``fraction`` of each dimension and is then narrowed on
    one axis to match ``aspect_ratio`` (width / height) when one is given.

    Args:
        width: Source width
        height: Source height
        aspect_ratio: Optional target width / height
        fraction: Portion of each dimension to keep (0-1]

    Returns:
        CropArea centered in the source
    """
    if width <= 0 or height <= 0:
        raise InvalidParameter(f"Source dimensions must be positive, got {width}x{height}")
    if not 0 < fraction <= 1:
        raise InvalidParameter(f"fraction must be in (0, 1], got {fraction}")
    if aspect_ratio is not None and not aspect_ratio > 0:
        raise InvalidParameter(f"aspect_ratio must be > 0, got {aspect_ratio}")

    crop_width = width * fraction
    crop_height = height * fraction

    if aspect_ratio:
        if crop_width / crop_height > aspect_ratio:
            crop_width = crop_height * aspect_ratio
        else:
            crop_height = crop_width / aspect_ratio

    crop_width = max(1, int(round(crop_width)))
    crop_height = max(1, int(round(crop_height)))

    return CropArea(
        x=(width - crop_width) // 2,
        y=(height - crop_height) // 2,
        width=crop_width,
        height=crop_height,
        aspect_ratio=aspect_ratio,
    )
