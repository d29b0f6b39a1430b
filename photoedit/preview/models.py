"""
Data models for the PhotoEdit preview system.
"""

from dataclasses import dataclass

from ..processing.raster import RasterBuffer

# Bounding box edge of filter thumbnails, in pixels
DEFAULT_THUMBNAIL_SIZE = 100


@dataclass(frozen=True)
class FilterPreview:
    """One preset rendered onto the shared thumbnail."""
    filter_id: str
    preview: RasterBuffer
