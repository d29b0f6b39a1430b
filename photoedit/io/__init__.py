"""
Image file I/O for PhotoEdit
"""

from .images import (
    load_image,
    save_image,
    decode_image,
    encode_image,
    from_pil,
    to_pil,
    find_images,
    format_for_path,
    SUPPORTED_EXTENSIONS,
    DEFAULT_JPEG_QUALITY,
)

__all__ = [
    'load_image',
    'save_image',
    'decode_image',
    'encode_image',
    'from_pil',
    'to_pil',
    'find_images',
    'format_for_path',
    'SUPPORTED_EXTENSIONS',
    'DEFAULT_JPEG_QUALITY',
]
