"""
Edit session and history management for PhotoEdit.

Implements undo/redo over an ordered edit log for non-destructive editing.
Index -1 is the implicit default state (neutral adjustments, default
transform, no crop) and is never stored as an entry.
"""

import json
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

from ..errors import InvalidParameter
from .raster import RasterBuffer
from .adjustments import Adjustments, AdjustmentEngine, DEFAULT_ADJUSTMENTS
from .geometry import (
    Transform, CropArea, DEFAULT_TRANSFORM, TransformEngine,
    crop_image, rotated_bounds, validate_crop,
)
from .filters import FilterPresetRegistry, get_default_registry

logger = logging.getLogger(__name__)

DEFAULT_SEED = 0


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of the edit state after one user action."""
    timestamp: float
    action: str
    adjustments: Adjustments
    transform: Transform
    crop: Optional[CropArea] = None
    active_filter: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'action': self.action,
            'adjustments': self.adjustments.to_dict(),
            'transform': self.transform.to_dict(),
            'crop': self.crop.to_dict() if self.crop else None,
            'active_filter': self.active_filter,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'HistoryEntry':
        if 'timestamp' not in data or 'action' not in data:
            raise InvalidParameter(f"History entry missing timestamp or action: {dict(data)!r}")
        crop = data.get('crop')
        return cls(
            timestamp=float(data['timestamp']),
            action=str(data['action']),
            adjustments=Adjustments.from_dict(data.get('adjustments') or {}),
            transform=Transform.from_dict(data.get('transform') or {}),
            crop=CropArea.from_dict(crop) if crop else None,
            active_filter=data.get('active_filter'),
        )


class EditSession:
    """
    Editing session rooted at one original image.

    Edits change the working state; ``commit`` records it in the history.
    The current image is rendered from the original as
    transform -> crop -> adjustments and cached until the state changes.
    """

    def __init__(self, original: RasterBuffer,
                 registry: Optional[FilterPresetRegistry] = None,
                 max_history: Optional[int] = None,
                 seed: int = DEFAULT_SEED):
        """
        Initialize an edit session.

        Args:
            original: Decoded source image, never modified
            registry: Filter presets available to ``apply_filter``
            max_history: Maximum number of entries to retain (None = unbounded)
            seed: Seed for the grain pass, so renders are reproducible
        """
        if max_history is not None and max_history < 1:
            raise InvalidParameter(f"max_history must be >= 1, got {max_history}")

        self.original = original
        self.registry = registry or get_default_registry()
        self.max_history = max_history
        self.seed = seed

        self._transform_engine = TransformEngine()
        self._history: List[HistoryEntry] = []
        self._history_index = -1
        self._load_defaults()

        logger.info(f"Started edit session on {original.width}x{original.height} image")

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def adjustments(self) -> Adjustments:
        return self._adjustments

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def crop(self) -> Optional[CropArea]:
        return self._crop

    @property
    def active_filter(self) -> Optional[str]:
        return self._active_filter

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def current_image(self) -> RasterBuffer:
        """Original image with the working state applied."""
        if self._current_image is None:
            self._current_image = self.render()
        return self._current_image

    def can_undo(self) -> bool:
        """Undo is possible from any stored entry, back to the default state."""
        return self._history_index >= 0

    def can_redo(self) -> bool:
        return self._history_index < len(self._history) - 1

    def render(self) -> RasterBuffer:
        """Render the working state from the original image."""
        start_time = time.time()
        image = self._transform_engine.apply(self.original, self._transform)
        if self._crop is not None:
            image = crop_image(image, self._crop)
        engine = AdjustmentEngine(np.random.default_rng(self.seed))
        image = engine.apply(image, self._adjustments)
        logger.debug(f"Rendered session image in {time.time() - start_time:.3f}s")
        return image

    # ------------------------------------------------------------------
    # Working-state edits
    # ------------------------------------------------------------------

    def set_adjustments(self, adjustments: Adjustments) -> None:
        self._adjustments = adjustments
        self._invalidate()

    def update_adjustments(self, **changes: float) -> Adjustments:
        """
        Override individual adjustment fields.

        Raises:
            InvalidParameter: For unknown fields or out-of-range values
        """
        self.set_adjustments(self._adjustments.merged(changes))
        return self._adjustments

    def set_transform(self, transform: Transform) -> None:
        """
        Replace the transform.

        An existing crop must still fit the re-bounded image.
        """
        if self._crop is not None:
            width, height = rotated_bounds(self.original.width, self.original.height, transform)
            validate_crop(self._crop, width, height)
        else:
            # Reject empty outputs before any pixel work
            rotated_bounds(self.original.width, self.original.height, transform)
        self._transform = transform
        self._invalidate()

    def rotate(self, degrees: float) -> Transform:
        """Rotate by ``degrees`` relative to the current rotation."""
        self.set_transform(replace(self._transform, rotate=(self._transform.rotate + degrees) % 360))
        return self._transform

    def flip_horizontal(self) -> Transform:
        self.set_transform(replace(self._transform, flip_horizontal=not self._transform.flip_horizontal))
        return self._transform

    def flip_vertical(self) -> Transform:
        self.set_transform(replace(self._transform, flip_vertical=not self._transform.flip_vertical))
        return self._transform

    def set_scale(self, scale: float) -> Transform:
        self.set_transform(replace(self._transform, scale=scale))
        return self._transform

    def set_crop(self, crop: Optional[CropArea]) -> None:
        """
        Set or clear the crop rectangle.

        The rectangle is in coordinates of the transformed image.

        Raises:
            InvalidParameter: If the rectangle exceeds the transformed bounds
        """
        if crop is not None:
            width, height = rotated_bounds(self.original.width, self.original.height, self._transform)
            validate_crop(crop, width, height)
        self._crop = crop
        self._invalidate()

    def apply_filter(self, filter_id: str) -> bool:
        """
        Replace the adjustments with a preset merged over neutral defaults.

        Returns:
            True if the preset was found. Unknown ids leave the state as is.
        """
        preset = self.registry.get(filter_id)
        if preset is None:
            logger.warning(f"Unknown filter preset '{filter_id}', state unchanged")
            return False

        self._adjustments = preset.to_adjustments()
        self._active_filter = preset.id
        self._invalidate()
        return True

    # ------------------------------------------------------------------
    # History transitions
    # ------------------------------------------------------------------

    def commit(self, action: str) -> HistoryEntry:
        """
        Record the working state as a new history entry.

        Any entries after the current position are discarded first.

        Args:
            action: Human-readable action label

        Returns:
            The new entry
        """
        entry = HistoryEntry(
            timestamp=time.time(),
            action=action,
            adjustments=self._adjustments,
            transform=self._transform,
            crop=self._crop,
            active_filter=self._active_filter,
        )

        discarded = len(self._history) - (self._history_index + 1)
        del self._history[self._history_index + 1:]
        if discarded:
            logger.debug(f"Discarded {discarded} redo entries")

        self._history.append(entry)
        self._history_index = len(self._history) - 1

        if self.max_history is not None and len(self._history) > self.max_history:
            removed_count = len(self._history) - self.max_history
            del self._history[:removed_count]
            self._history_index -= removed_count
            logger.debug(f"Trimmed {removed_count} old entries from history")

        logger.debug(f"Committed action: {action} (index {self._history_index})")
        return entry

    def undo(self) -> int:
        """
        Step back one entry.

        From the first entry (or from the default state) this returns to the
        default state at index -1.

        Returns:
            The new history index
        """
        if self._history_index <= 0:
            self._load_defaults()
            self._history_index = -1
            logger.debug("Undo: returned to default state")
            return self._history_index

        self._history_index -= 1
        self._load_entry(self._history[self._history_index])
        logger.debug(f"Undo: moved to position {self._history_index}")
        return self._history_index

    def redo(self) -> int:
        """
        Step forward one entry. No-op at the newest entry.

        Returns:
            The new history index
        """
        if self._history_index >= len(self._history) - 1:
            logger.debug("Cannot redo: no future entries")
            return self._history_index

        self._history_index += 1
        self._load_entry(self._history[self._history_index])
        logger.debug(f"Redo: moved to position {self._history_index}")
        return self._history_index

    def reset_to_original(self) -> None:
        """Discard all history and return to a fresh session state."""
        self._history = []
        self._history_index = -1
        self._load_defaults()
        logger.info("Reset session to original image")

    def _load_defaults(self) -> None:
        self._adjustments = DEFAULT_ADJUSTMENTS
        self._transform = DEFAULT_TRANSFORM
        self._crop = None
        self._active_filter = None
        self._current_image: Optional[RasterBuffer] = None

    def _load_entry(self, entry: HistoryEntry) -> None:
        self._adjustments = entry.adjustments
        self._transform = entry.transform
        self._crop = entry.crop
        self._active_filter = entry.active_filter
        self._invalidate()

    def _invalidate(self) -> None:
        self._current_image = None

    # ------------------------------------------------------------------
    # Summary and persistence
    # ------------------------------------------------------------------

    def get_history_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the current history state.

        Returns:
            History summary with the most recent actions
        """
        return {
            'total_entries': len(self._history),
            'history_index': self._history_index,
            'can_undo': self.can_undo(),
            'can_redo': self.can_redo(),
            'active_filter': self._active_filter,
            'recent_actions': [
                {
                    'timestamp': entry.timestamp,
                    'action': entry.action,
                }
                for entry in self._history[-5:]  # Last 5 actions
            ],
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the working state and history (not the pixels)."""
        return {
            'adjustments': self._adjustments.to_dict(),
            'transform': self._transform.to_dict(),
            'crop': self._crop.to_dict() if self._crop else None,
            'active_filter': self._active_filter,
            'history': [entry.to_dict() for entry in self._history],
            'history_index': self._history_index,
            'seed': self.seed,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], original: RasterBuffer,
                  registry: Optional[FilterPresetRegistry] = None,
                  max_history: Optional[int] = None) -> 'EditSession':
        """
        Restore a session over ``original``.

        Every crop is checked against the bounds of its transform. When
        ``max_history`` is set, the oldest entries beyond it are dropped.

        Raises:
            InvalidParameter: If the history index is out of range or a crop
                does not fit its transformed image
        """
        session = cls(original, registry=registry, max_history=max_history,
                      seed=int(data.get('seed', DEFAULT_SEED)))

        history = [HistoryEntry.from_dict(item) for item in data.get('history', [])]
        index = int(data.get('history_index', len(history) - 1))
        if not -1 <= index <= len(history) - 1:
            raise InvalidParameter(f"history_index {index} out of range for {len(history)} entries")

        for entry in history:
            session._check_crop(entry.crop, entry.transform)

        crop = data.get('crop')
        adjustments = Adjustments.from_dict(data.get('adjustments') or {})
        transform = Transform.from_dict(data.get('transform') or {})
        crop = CropArea.from_dict(crop) if crop else None
        session._check_crop(crop, transform)

        if max_history is not None and len(history) > max_history:
            removed_count = len(history) - max_history
            del history[:removed_count]
            # A position inside the dropped entries falls back to the default state
            index = max(index - removed_count, -1)
            logger.debug(f"Trimmed {removed_count} old entries from restored history")

        session._history = history
        session._history_index = index
        session._adjustments = adjustments
        session._transform = transform
        session._crop = crop
        session._active_filter = data.get('active_filter')
        session._invalidate()
        return session

    def _check_crop(self, crop: Optional[CropArea], transform: Transform) -> None:
        if crop is not None:
            width, height = rotated_bounds(self.original.width, self.original.height, transform)
            validate_crop(crop, width, height)

    def export_history(self, file_path: Union[str, Path]) -> None:
        """
        Export session state and history to a JSON file.

        Raises:
            OSError: If the file cannot be written
        """
        history_data = self.to_dict()
        history_data['exported_at'] = datetime.now().isoformat()

        with open(file_path, 'w') as f:
            json.dump(history_data, f, indent=2)

        logger.info(f"Exported history to {file_path}")

    @classmethod
    def import_history(cls, file_path: Union[str, Path], original: RasterBuffer,
                       registry: Optional[FilterPresetRegistry] = None,
                       max_history: Optional[int] = None) -> 'EditSession':
        """
        Load a session exported with ``export_history``.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not valid JSON
            InvalidParameter: If the stored state is inconsistent
        """
        with open(file_path, 'r') as f:
            history_data = json.load(f)

        session = cls.from_dict(history_data, original, registry=registry, max_history=max_history)
        logger.info(f"Imported history from {file_path}")
        return session
