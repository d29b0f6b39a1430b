"""
Color adjustment engine for PhotoEdit

Provides the 14-field Adjustments model and the ordered pixel passes
(color, blur, vignette, grain) that apply it.
"""

from .models import Adjustments, ADJUSTMENT_RANGES, DEFAULT_ADJUSTMENTS
from .engine import (
    AdjustmentEngine,
    apply_adjustments,
    css_filter_string,
    BLUR_RADIUS_DIVISOR,
)

__all__ = [
    'Adjustments',
    'ADJUSTMENT_RANGES',
    'DEFAULT_ADJUSTMENTS',
    'AdjustmentEngine',
    'apply_adjustments',
    'css_filter_string',
    'BLUR_RADIUS_DIVISOR',
]
