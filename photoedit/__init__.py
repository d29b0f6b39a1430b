"""
PhotoEdit: non-destructive raster image editor

Color adjustments, geometric transforms, cropping, filter presets and an
undo/redo edit history over immutable RGBA8 buffers.
"""

__version__ = "0.1.0"
__author__ = "Sam Scarrow"

# Core imports for easy access
from .config import load_config
from .errors import PhotoEditError, InvalidParameter, UnknownPreset, DecodeError, EncodeError
from .processing import (
    RasterBuffer,
    Adjustments,
    Transform,
    CropArea,
    apply_adjustments,
    apply_transform,
    crop_image,
    apply_filter,
    EditSession,
)
from .preview import generate_filter_previews

__all__ = [
    "load_config",
    "PhotoEditError",
    "InvalidParameter",
    "UnknownPreset",
    "DecodeError",
    "EncodeError",
    "RasterBuffer",
    "Adjustments",
    "Transform",
    "CropArea",
    "apply_adjustments",
    "apply_transform",
    "crop_image",
    "apply_filter",
    "EditSession",
    "generate_filter_previews",
]
