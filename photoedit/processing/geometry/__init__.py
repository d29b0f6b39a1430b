"""
Geometry modules for PhotoEdit

Includes rotate/flip/scale transforms, cropping and resizing.
"""

from .models import Transform, CropArea, DEFAULT_TRANSFORM
from .transform import TransformEngine, apply_transform, rotated_bounds
from .crop import crop_image, centered_crop, validate_crop
from .resize import resize_image, fit_dimensions, image_dimensions

__all__ = [
    "Transform",
    "CropArea",
    "DEFAULT_TRANSFORM",
    "TransformEngine",
    "apply_transform",
    "rotated_bounds",
    "crop_image",
    "centered_crop",
    "validate_crop",
    "resize_image",
    "fit_dimensions",
    "image_dimensions",
]
