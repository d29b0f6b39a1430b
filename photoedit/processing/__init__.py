"""
Image processing modules for PhotoEdit

Includes the raster buffer type, color adjustments, geometry, filter presets
and the undo/redo edit session.
"""

from .raster import RasterBuffer
from .adjustments import Adjustments, AdjustmentEngine, apply_adjustments
from .geometry import Transform, CropArea, apply_transform, crop_image, resize_image
from .filters import FilterPreset, FilterPresetRegistry, apply_filter
from .history import EditSession, HistoryEntry

__all__ = [
    "RasterBuffer",
    "Adjustments",
    "AdjustmentEngine",
    "apply_adjustments",
    "Transform",
    "CropArea",
    "apply_transform",
    "crop_image",
    "resize_image",
    "FilterPreset",
    "FilterPresetRegistry",
    "apply_filter",
    "EditSession",
    "HistoryEntry",
]
