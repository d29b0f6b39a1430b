"""
Pytest configuration and shared fixtures for PhotoEdit tests.
"""

import logging

import numpy as np
import pytest

from photoedit.processing.raster import RasterBuffer
from photoedit.processing.filters import FilterPresetRegistry


@pytest.fixture
def primaries_buffer():
    """2x2 buffer with red, green, blue and white pixels."""
    return RasterBuffer.from_pixels(2, 2, [
        (255, 0, 0),
        (0, 255, 0),
        (0, 0, 255),
        (255, 255, 255),
    ])


@pytest.fixture
def gradient_buffer():
    """Opaque 40x20 buffer with varied values in every pixel."""
    height, width = 20, 40
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = (xs * 6) % 256
    pixels[:, :, 1] = (ys * 12) % 256
    pixels[:, :, 2] = (xs * 3 + ys * 5) % 256
    pixels[:, :, 3] = 255
    return RasterBuffer(pixels)


@pytest.fixture
def gray_buffer():
    """Opaque 16x16 mid-gray buffer."""
    return RasterBuffer.blank(16, 16, (128, 128, 128, 255))


@pytest.fixture
def registry():
    """Registry holding the built-in catalog."""
    return FilterPresetRegistry()


@pytest.fixture(autouse=True)
def _remove_console_handlers():
    """Drop console handlers installed by CLI invocations."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        if getattr(handler, '_photoedit_console', False):
            root_logger.removeHandler(handler)
