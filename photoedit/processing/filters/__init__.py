"""
Filter preset catalog for PhotoEdit
"""

from .presets import (
    FilterPreset,
    FilterPresetRegistry,
    PRESET_FILTERS,
    NONE_FILTER_ID,
    apply_filter,
    get_default_registry,
)

__all__ = [
    "FilterPreset",
    "FilterPresetRegistry",
    "PRESET_FILTERS",
    "NONE_FILTER_ID",
    "apply_filter",
    "get_default_registry",
]
