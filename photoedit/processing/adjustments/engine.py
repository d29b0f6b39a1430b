"""
Adjustment engine that applies color corrections to raster buffers.

Passes run in a fixed order because blur, vignette and grain work on the
color-corrected result:

1. fused per-pixel color pass
2. blur (separable Gaussian)
3. vignette (radial darkening)
4. grain (additive noise)
"""

import logging
import math
import time
from typing import Optional

import cv2
import numpy as np

from ..raster import RasterBuffer
from .models import Adjustments

logger = logging.getLogger(__name__)

# Blur sigma in pixels is blur / BLUR_RADIUS_DIVISOR (blur=100 -> 10px).
BLUR_RADIUS_DIVISOR = 10.0

# Gaussian kernel extends this many sigmas on each side of the center tap.
BLUR_KERNEL_SIGMAS = 3

# Rec. 601 luma weights used by the saturation stage.
LUMA_WEIGHTS = (0.2989, 0.587, 0.114)

# Vignette gradient: transparent up to this fraction of the outer radius,
# then linear to full strength at the outer radius.
VIGNETTE_INNER_STOP = 0.5

# Grain samples span [-grain, +grain), i.e. an amplitude of grain * 2.
GRAIN_AMPLITUDE_FACTOR = 2.0


class AdjustmentEngine:
    """
    Applies Adjustments to a RasterBuffer.

    Every field is skipped when it is 0, which is also its neutral value,
    so neutral adjustments return a pixel-identical buffer.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        """
        Initialize the engine.

        Args:
            rng: Random generator used by the grain pass. A fresh unseeded
                 generator is created when omitted.
        """
        self.rng = rng if rng is not None else np.random.default_rng()

    def apply(self, buffer: RasterBuffer, adjustments: Adjustments,
              rng: Optional[np.random.Generator] = None) -> RasterBuffer:
        """
        Apply all adjustment passes.

        Args:
            buffer: Source buffer (never mutated)
            adjustments: Adjustment values
            rng: Optional generator overriding the engine's own for grain

        Returns:
            New RasterBuffer
        """
        if adjustments.is_neutral():
            return buffer

        start_time = time.time()
        pixels = buffer.to_array()

        if self._has_color_changes(adjustments):
            pixels = self._apply_color_pass(pixels, adjustments)

        if adjustments.blur > 0:
            pixels = self._apply_blur(pixels, adjustments.blur)

        if adjustments.vignette > 0:
            pixels = self._apply_vignette(pixels, adjustments.vignette)

        if adjustments.grain > 0:
            pixels = self._apply_grain(pixels, adjustments.grain, rng or self.rng)

        duration = time.time() - start_time
        logger.debug(f"Adjusted {buffer.width}x{buffer.height} buffer in {duration:.3f}s "
                     f"({adjustments.non_neutral()})")
        return RasterBuffer(pixels)

    @staticmethod
    def _has_color_changes(adjustments: Adjustments) -> bool:
        return any([adjustments.brightness, adjustments.contrast, adjustments.saturation,
                    adjustments.temperature, adjustments.tint, adjustments.exposure,
                    adjustments.vibrance])

    def _apply_color_pass(self, pixels: np.ndarray, adj: Adjustments) -> np.ndarray:
        """
        Brightness, contrast, saturation, temperature, tint, exposure, vibrance.

        Channel values may become infinite or NaN at the contrast pole
        (contrast = 259 / 255 * 100 - 100). They are resolved when converting
        back to 8 bits.
        """
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            rgb = self._color_stages(pixels[:, :, :3].astype(np.float64), adj)

        result = pixels.copy()
        result[:, :, :3] = _to_uint8(rgb)
        return result

    @staticmethod
    def _color_stages(rgb: np.ndarray, adj: Adjustments) -> np.ndarray:
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]

        if adj.brightness:
            offset = adj.brightness * 2.55
            r, g, b = r + offset, g + offset, b + offset

        if adj.contrast:
            c255 = (adj.contrast + 100) / 100 * 255
            # Infinite at c255 == 259
            factor = np.float64(259 * (c255 + 255)) / np.float64(255 * (259 - c255))
            r = factor * (r - 128) + 128
            g = factor * (g - 128) + 128
            b = factor * (b - 128) + 128

        if adj.saturation:
            amount = 1 + adj.saturation / 100
            gray = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
            r = gray + (r - gray) * amount
            g = gray + (g - gray) * amount
            b = gray + (b - gray) * amount

        if adj.temperature:
            shift = adj.temperature * 0.5
            r = r + shift
            b = b - shift

        if adj.tint:
            g = g + adj.tint * 0.3

        if adj.exposure:
            gain = math.pow(2, adj.exposure / 50)
            r, g, b = r * gain, g * gain, b * gain

        if adj.vibrance:
            vibrance = adj.vibrance / 100
            max_channel = np.maximum(np.maximum(r, g), b)
            avg = (r + g + b) / 3
            amount = (np.abs(max_channel - avg) * 2 / 255) * vibrance
            r = r + (max_channel - r) * amount
            g = g + (max_channel - g) * amount
            b = b + (max_channel - b) * amount

        return np.stack([r, g, b], axis=2)

    def _apply_blur(self, pixels: np.ndarray, blur: float) -> np.ndarray:
        """
        Separable Gaussian blur over all four channels.

        sigma = blur / BLUR_RADIUS_DIVISOR, kernel size 2 * ceil(3 * sigma) + 1,
        borders replicated. The horizontal and vertical passes both read from
        a float copy of the pre-blur pixels.
        """
        sigma = blur / BLUR_RADIUS_DIVISOR
        half = math.ceil(BLUR_KERNEL_SIGMAS * sigma)
        kernel = cv2.getGaussianKernel(2 * half + 1, sigma, cv2.CV_64F)

        source = pixels.astype(np.float64)
        blurred = cv2.sepFilter2D(source, cv2.CV_64F, kernel, kernel,
                                  borderType=cv2.BORDER_REPLICATE)
        return _to_uint8(blurred)

    def _apply_vignette(self, pixels: np.ndarray, vignette: float) -> np.ndarray:
        """Composite a centered black radial gradient over the buffer."""
        height, width = pixels.shape[:2]
        opacity = self._vignette_mask(width, height, vignette)

        rgba = pixels.astype(np.float64)
        src_alpha = rgba[:, :, 3] / 255.0

        # Black source-over the existing pixels
        out_alpha = opacity + src_alpha * (1 - opacity)
        weight = np.divide(src_alpha * (1 - opacity), out_alpha,
                           out=np.zeros_like(out_alpha), where=out_alpha > 0)

        result = np.empty_like(rgba)
        result[:, :, :3] = rgba[:, :, :3] * weight[:, :, np.newaxis]
        result[:, :, 3] = out_alpha * 255.0
        return _to_uint8(result)

    @staticmethod
    def _vignette_mask(width: int, height: int, vignette: float) -> np.ndarray:
        """Per-pixel black opacity of the vignette gradient."""
        center_x, center_y = width / 2, height / 2
        outer_radius = max(width, height) / 2

        xs = np.arange(width, dtype=np.float64) + 0.5 - center_x
        ys = np.arange(height, dtype=np.float64) + 0.5 - center_y
        distance = np.sqrt(xs[np.newaxis, :] ** 2 + ys[:, np.newaxis] ** 2)

        # Past the outer radius the gradient holds its last stop
        position = np.clip(distance / outer_radius, 0, 1)
        ramp = np.clip((position - VIGNETTE_INNER_STOP) / (1 - VIGNETTE_INNER_STOP), 0, 1)
        return ramp * (vignette / 100)

    def _apply_grain(self, pixels: np.ndarray, grain: float,
                     rng: np.random.Generator) -> np.ndarray:
        """Add one uniform noise sample per pixel to R, G and B."""
        height, width = pixels.shape[:2]
        amplitude = grain * GRAIN_AMPLITUDE_FACTOR
        noise = (rng.random((height, width)) - 0.5) * amplitude

        result = pixels.copy()
        rgb = pixels[:, :, :3].astype(np.float64) + noise[:, :, np.newaxis]
        result[:, :, :3] = _to_uint8(rgb)
        return result


def _to_uint8(values: np.ndarray) -> np.ndarray:
    """Round half to even and clamp to 0-255. NaN becomes 0."""
    values = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def apply_adjustments(buffer: RasterBuffer, adjustments: Adjustments,
                      rng: Optional[np.random.Generator] = None) -> RasterBuffer:
    """Apply ``adjustments`` to ``buffer`` with a one-off engine."""
    return AdjustmentEngine(rng).apply(buffer, adjustments)


def css_filter_string(adjustments: Adjustments) -> str:
    """
    Approximate the adjustments as a CSS filter for a live preview layer.

    Only brightness, contrast, saturation and blur have CSS counterparts.
    """
    filters = []
    if adjustments.brightness:
        filters.append(f"brightness({1 + adjustments.brightness / 100:g})")
    if adjustments.contrast:
        filters.append(f"contrast({1 + adjustments.contrast / 100:g})")
    if adjustments.saturation:
        filters.append(f"saturate({1 + adjustments.saturation / 100:g})")
    if adjustments.blur:
        filters.append(f"blur({adjustments.blur / 10:g}px)")
    return " ".join(filters) or "none"
