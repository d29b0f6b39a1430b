"""
Filter presets for PhotoEdit

A preset is a named, fixed set of partial adjustments. Fields a preset does
not set stay neutral when it is applied.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from ...errors import InvalidParameter, UnknownPreset
from ..raster import RasterBuffer
from ..adjustments import Adjustments, AdjustmentEngine, DEFAULT_ADJUSTMENTS

logger = logging.getLogger(__name__)

NONE_FILTER_ID = "none"


@dataclass(frozen=True)
class FilterPreset:
    """A named partial adjustment set exposed to users as a filter."""
    id: str
    name: str
    adjustments: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if not self.id:
            raise InvalidParameter("Preset id must not be empty")
        # Validates field names and ranges
        object.__setattr__(self, 'adjustments', dict(self.adjustments))
        DEFAULT_ADJUSTMENTS.merged(self.adjustments)

    def __hash__(self) -> int:
        return hash((self.id, self.name, tuple(sorted(self.adjustments.items()))))

    @property
    def is_identity(self) -> bool:
        return self.id == NONE_FILTER_ID or not any(self.adjustments.values())

    def to_adjustments(self) -> Adjustments:
        """The preset merged over neutral defaults."""
        return DEFAULT_ADJUSTMENTS.merged(self.adjustments)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'adjustments': dict(self.adjustments),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'FilterPreset':
        try:
            return cls(
                id=str(data['id']),
                name=str(data.get('name', data['id'])),
                adjustments=data.get('adjustments') or {},
            )
        except KeyError as e:
            raise InvalidParameter(f"Preset definition missing {e}") from e


PRESET_FILTERS: Tuple[FilterPreset, ...] = (
    FilterPreset('none', 'None', {}),
    FilterPreset('vivid', 'Vivid', {
        'saturation': 30,
        'contrast': 15,
        'vibrance': 20,
    }),
    FilterPreset('dramatic', 'Dramatic', {
        'contrast': 40,
        'shadows': -20,
        'highlights': -10,
        'saturation': -10,
    }),
    FilterPreset('noir', 'Noir', {
        'saturation': -100,
        'contrast': 30,
        'brightness': -10,
    }),
    FilterPreset('silvertone', 'Silvertone', {
        'saturation': -100,
        'contrast': 10,
        'brightness': 5,
    }),
    FilterPreset('fade', 'Fade', {
        'contrast': -20,
        'brightness': 10,
        'saturation': -20,
    }),
    FilterPreset('vintage', 'Vintage', {
        'temperature': 20,
        'saturation': -20,
        'contrast': 10,
        'vignette': 30,
        'grain': 20,
    }),
    FilterPreset('retro', 'Retro', {
        'temperature': 30,
        'tint': 10,
        'saturation': -10,
        'contrast': 20,
        'vignette': 25,
    }),
    FilterPreset('instant', 'Instant', {
        'contrast': 20,
        'saturation': 20,
        'temperature': 10,
        'vignette': 20,
    }),
    FilterPreset('chrome', 'Chrome', {
        'contrast': 30,
        'saturation': 20,
        'highlights': -20,
        'shadows': 20,
    }),
    FilterPreset('process', 'Process', {
        'temperature': -20,
        'contrast': 25,
        'saturation': 15,
    }),
    FilterPreset('transfer', 'Transfer', {
        'temperature': 25,
        'saturation': -15,
        'contrast': 20,
        'brightness': 10,
    }),
    FilterPreset('sepia', 'Sepia', {
        'saturation': -60,
        'temperature': 40,
        'tint': 10,
    }),
    FilterPreset('cool', 'Cool', {
        'temperature': -30,
        'tint': -10,
        'saturation': 10,
    }),
    FilterPreset('warm', 'Warm', {
        'temperature': 30,
        'tint': 10,
        'saturation': 10,
    }),
    FilterPreset('cinematic', 'Cinematic', {
        'contrast': 20,
        'saturation': -10,
        'temperature': 10,
        'vignette': 40,
        'shadows': -15,
    }),
    FilterPreset('hdr', 'HDR', {
        'contrast': 40,
        'saturation': 30,
        'highlights': -30,
        'shadows': 40,
        'sharpness': 30,
    }),
    FilterPreset('matte', 'Matte', {
        'contrast': -20,
        'shadows': 30,
        'saturation': -15,
    }),
    FilterPreset('clarendon', 'Clarendon', {
        'contrast': 20,
        'saturation': 15,
        'highlights': -10,
        'shadows': 10,
    }),
    FilterPreset('gingham', 'Gingham', {
        'brightness': 10,
        'saturation': -10,
        'contrast': -10,
    }),
)


class FilterPresetRegistry:
    """
    Ordered catalog of filter presets.

    Iteration follows catalog order, which is also the order previews and
    selection lists are shown in.
    """

    def __init__(self, presets: Iterable[FilterPreset] = PRESET_FILTERS):
        self._presets: Dict[str, FilterPreset] = {}
        for preset in presets:
            self.register(preset)

    def register(self, preset: FilterPreset) -> None:
        """
        Append a preset to the catalog.

        Raises:
            InvalidParameter: If the id is already registered
        """
        if preset.id in self._presets:
            raise InvalidParameter(f"Preset id already registered: {preset.id!r}")
        self._presets[preset.id] = preset
        logger.debug(f"Registered filter preset: {preset.id}")

    def get(self, filter_id: str) -> Optional[FilterPreset]:
        return self._presets.get(filter_id)

    def require(self, filter_id: str) -> FilterPreset:
        """
        Get a preset that must exist.

        Raises:
            UnknownPreset: If ``filter_id`` is not registered
        """
        preset = self._presets.get(filter_id)
        if preset is None:
            raise UnknownPreset(filter_id)
        return preset

    def ids(self) -> List[str]:
        return list(self._presets)

    def adjustments_for(self, filter_id: str) -> Adjustments:
        """Full adjustments for a preset. Unknown ids resolve to neutral."""
        preset = self.get(filter_id)
        if preset is None:
            return DEFAULT_ADJUSTMENTS
        return preset.to_adjustments()

    def to_catalog(self) -> List[Dict[str, Any]]:
        """Plain-data catalog for selection lists."""
        return [preset.to_dict() for preset in self]

    def apply_filter(self, buffer: RasterBuffer, filter_id: str,
                     rng: Optional[np.random.Generator] = None) -> RasterBuffer:
        """
        Apply a preset to ``buffer``.

        "none" and unknown ids return the input unchanged.
        """
        preset = self.get(filter_id)
        if preset is None:
            logger.warning(f"Unknown filter preset '{filter_id}', returning image unchanged")
            return buffer
        if preset.id == NONE_FILTER_ID:
            return buffer

        return AdjustmentEngine(rng).apply(buffer, preset.to_adjustments())

    def __iter__(self) -> Iterator[FilterPreset]:
        return iter(self._presets.values())

    def __len__(self) -> int:
        return len(self._presets)

    def __contains__(self, filter_id: object) -> bool:
        return filter_id in self._presets

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'FilterPresetRegistry':
        """
        Build the built-in catalog plus any ``filters.custom`` presets.

        Args:
            config: Configuration dictionary
        """
        registry = cls()
        custom = (config.get('filters') or {}).get('custom') or []
        for definition in custom:
            registry.register(FilterPreset.from_dict(definition))
        if custom:
            logger.info(f"Loaded {len(custom)} custom filter preset(s)")
        return registry


_default_registry: Optional[FilterPresetRegistry] = None


def get_default_registry() -> FilterPresetRegistry:
    """Shared registry holding the built-in catalog."""
    global _default_registry
    if _default_registry is None:
        _default_registry = FilterPresetRegistry()
    return _default_registry


def apply_filter(buffer: RasterBuffer, filter_id: str,
                 rng: Optional[np.random.Generator] = None) -> RasterBuffer:
    """Apply a built-in preset to ``buffer``."""
    return get_default_registry().apply_filter(buffer, filter_id, rng)
