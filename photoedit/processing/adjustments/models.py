"""
Data models for color adjustments.
"""

import math
import numbers
from dataclasses import dataclass, fields, asdict, replace
from typing import Any, Dict, Mapping, Tuple

from ...errors import InvalidParameter


# Valid range per adjustment field. 0 is neutral for every field.
ADJUSTMENT_RANGES: Dict[str, Tuple[float, float]] = {
    'brightness': (-100.0, 100.0),
    'contrast': (-100.0, 100.0),
    'saturation': (-100.0, 100.0),
    'exposure': (-100.0, 100.0),
    'highlights': (-100.0, 100.0),
    'shadows': (-100.0, 100.0),
    'temperature': (-100.0, 100.0),
    'tint': (-100.0, 100.0),
    'vibrance': (-100.0, 100.0),
    'sharpness': (0.0, 100.0),
    'blur': (0.0, 100.0),
    'noise': (0.0, 100.0),
    'vignette': (0.0, 100.0),
    'grain': (0.0, 100.0),
}


@dataclass(frozen=True)
class Adjustments:
    """Per-pixel color correction parameters."""
    brightness: float = 0.0  # -100 to +100
    contrast: float = 0.0  # -100 to +100
    saturation: float = 0.0  # -100 to +100
    exposure: float = 0.0  # -100 to +100
    highlights: float = 0.0  # -100 to +100
    shadows: float = 0.0  # -100 to +100
    temperature: float = 0.0  # -100 to +100
    tint: float = 0.0  # -100 to +100
    vibrance: float = 0.0  # -100 to +100
    sharpness: float = 0.0  # 0 to 100
    blur: float = 0.0  # 0 to 100
    noise: float = 0.0  # 0 to 100
    vignette: float = 0.0  # 0 to 100
    grain: float = 0.0  # 0 to 100

    def __post_init__(self):
        """Validate adjustment values."""
        for name, (min_val, max_val) in ADJUSTMENT_RANGES.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidParameter(f"Adjustment '{name}' must be numeric, got {value!r}")
            if not math.isfinite(value):
                raise InvalidParameter(f"Adjustment '{name}' must be finite, got {value}")
            if not min_val <= value <= max_val:
                raise InvalidParameter(
                    f"Adjustment '{name}' value {value} out of range [{min_val}, {max_val}]"
                )

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def is_neutral(self) -> bool:
        """True when every field is at its neutral value."""
        return all(getattr(self, name) == 0 for name in ADJUSTMENT_RANGES)

    def merged(self, partial: Mapping[str, float]) -> 'Adjustments':
        """Return a copy with the fields in ``partial`` overridden."""
        unknown = set(partial) - set(ADJUSTMENT_RANGES)
        if unknown:
            raise InvalidParameter(f"Unknown adjustment field(s): {', '.join(sorted(unknown))}")
        return replace(self, **dict(partial))

    def non_neutral(self) -> Dict[str, float]:
        """Only the fields that differ from neutral."""
        return {name: value for name, value in asdict(self).items() if value != 0}

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Adjustments':
        """Create from dictionary. Missing fields are neutral."""
        return cls().merged(data)


DEFAULT_ADJUSTMENTS = Adjustments()
