"""
Filter preview generation.

The source is downscaled once and every preset is rendered against that
single thumbnail, so the cost of the resize does not grow with the number
of presets.
"""

import logging
import time
from typing import List, Optional

import numpy as np

from ..processing.raster import RasterBuffer
from ..processing.adjustments import AdjustmentEngine
from ..processing.geometry import resize_image
from ..processing.filters import FilterPresetRegistry, get_default_registry
from .models import FilterPreview, DEFAULT_THUMBNAIL_SIZE

logger = logging.getLogger(__name__)


class PreviewGenerator:
    """Renders preset thumbnails for a selection list."""

    def __init__(self, registry: Optional[FilterPresetRegistry] = None,
                 thumbnail_size: int = DEFAULT_THUMBNAIL_SIZE,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize the generator.

        Args:
            registry: Presets to render, in catalog order
            thumbnail_size: Bounding box edge for the shared thumbnail
            rng: Random generator for presets with grain
        """
        self.registry = registry or get_default_registry()
        self.thumbnail_size = thumbnail_size
        self.engine = AdjustmentEngine(rng)

    def generate(self, buffer: RasterBuffer,
                 thumbnail_size: Optional[int] = None) -> List[FilterPreview]:
        """
        Render every preset onto one downscaled copy of ``buffer``.

        Args:
            buffer: Source image
            thumbnail_size: Overrides the generator's bounding box edge

        Returns:
            Previews in registry order
        """
        size = thumbnail_size or self.thumbnail_size
        start_time = time.time()

        thumbnail = resize_image(buffer, size, size, maintain_aspect_ratio=True)

        previews = []
        for preset in self.registry:
            if preset.is_identity:
                preview = thumbnail
            else:
                preview = self.engine.apply(thumbnail, preset.to_adjustments())
            previews.append(FilterPreview(filter_id=preset.id, preview=preview))

        duration = time.time() - start_time
        logger.debug(f"Generated {len(previews)} filter previews at "
                     f"{thumbnail.width}x{thumbnail.height} in {duration:.3f}s")
        return previews


def generate_filter_previews(buffer: RasterBuffer,
                             thumbnail_size: int = DEFAULT_THUMBNAIL_SIZE,
                             registry: Optional[FilterPresetRegistry] = None,
                             rng: Optional[np.random.Generator] = None) -> List[FilterPreview]:
    """Render every preset in ``registry`` onto a ``thumbnail_size`` thumbnail."""
    return PreviewGenerator(registry, thumbnail_size, rng).generate(buffer)
