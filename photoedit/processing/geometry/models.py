"""
Data models for geometric edits.
"""

import math
import numbers
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional

from ...errors import InvalidParameter


@dataclass(frozen=True)
class Transform:
    """Whole-buffer rotation, flip and scale."""
    rotate: float = 0.0  # Degrees, clockwise
    flip_horizontal: bool = False
    flip_vertical: bool = False
    scale: float = 1.0  # Must be > 0

    def __post_init__(self):
        """Validate transform values."""
        if isinstance(self.rotate, bool) or not isinstance(self.rotate, numbers.Real) \
                or not math.isfinite(self.rotate):
            raise InvalidParameter(f"rotate must be a finite number, got {self.rotate!r}")
        if isinstance(self.scale, bool) or not isinstance(self.scale, numbers.Real) \
                or not math.isfinite(self.scale):
            raise InvalidParameter(f"scale must be a finite number, got {self.scale!r}")
        if self.scale <= 0:
            raise InvalidParameter(f"scale must be > 0, got {self.scale}")

    def is_identity(self) -> bool:
        return (self.rotate % 360 == 0 and not self.flip_horizontal
                and not self.flip_vertical and self.scale == 1)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Transform':
        return cls(
            rotate=data.get('rotate', 0.0),
            flip_horizontal=bool(data.get('flip_horizontal', False)),
            flip_vertical=bool(data.get('flip_vertical', False)),
            scale=data.get('scale', 1.0),
        )


DEFAULT_TRANSFORM = Transform()


@dataclass(frozen=True)
class CropArea:
    """Crop rectangle in pixel coordinates of the buffer it applies to."""
    x: int
    y: int
    width: int
    height: int
    aspect_ratio: Optional[float] = None  # width / height, informational

    def __post_init__(self):
        """Validate rectangle values that do not depend on the source size."""
        for name in ('x', 'y', 'width', 'height'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidParameter(f"Crop {name} must be an integer, got {value!r}")
        if self.width <= 0 or self.height <= 0:
            raise InvalidParameter(
                f"Crop dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.aspect_ratio is not None and not self.aspect_ratio > 0:
            raise InvalidParameter(f"aspect_ratio must be > 0, got {self.aspect_ratio}")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def fits_within(self, width: int, height: int) -> bool:
        """True when the rectangle lies inside a width x height buffer."""
        return self.x >= 0 and self.y >= 0 and self.right <= width and self.bottom <= height

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CropArea':
        """Create from dictionary, rounding fractional UI coordinates."""
        try:
            return cls(
                x=int(round(data['x'])),
                y=int(round(data['y'])),
                width=int(round(data['width'])),
                height=int(round(data['height'])),
                aspect_ratio=data.get('aspect_ratio'),
            )
        except (KeyError, TypeError) as e:
            raise InvalidParameter(f"Malformed crop area {dict(data)!r}: {e}") from e
