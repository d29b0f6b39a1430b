"""
PhotoEdit Preview System

Renders filter preset thumbnails from a single downscaled source.
"""

from .models import FilterPreview, DEFAULT_THUMBNAIL_SIZE
from .preview_generator import PreviewGenerator, generate_filter_previews

__all__ = [
    'FilterPreview',
    'DEFAULT_THUMBNAIL_SIZE',
    'PreviewGenerator',
    'generate_filter_previews',
]
