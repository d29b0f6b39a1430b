"""
Tests for transforms, cropping and resizing.
"""

import pytest
import numpy as np

from photoedit.errors import InvalidParameter
from photoedit.processing.raster import RasterBuffer
from photoedit.processing.geometry import (
    Transform, CropArea, DEFAULT_TRANSFORM, TransformEngine,
    apply_transform, rotated_bounds, crop_image, centered_crop,
    resize_image, fit_dimensions, image_dimensions,
)


@pytest.fixture
def wide_buffer():
    """3x2 buffer with a distinct color per pixel."""
    return RasterBuffer.from_pixels(3, 2, [
        (10, 0, 0), (20, 0, 0), (30, 0, 0),
        (40, 0, 0), (50, 0, 0), (60, 0, 0),
    ])


class TestTransformModel:
    """Test Transform validation."""

    def test_default_is_identity(self):
        """Test identity detection."""
        assert DEFAULT_TRANSFORM.is_identity()
        assert Transform(rotate=360).is_identity()
        assert not Transform(flip_horizontal=True).is_identity()

    @pytest.mark.parametrize("scale", [0, -1, float("nan"), float("inf")])
    def test_invalid_scale(self, scale):
        """Test non-positive and non-finite scales are rejected."""
        with pytest.raises(InvalidParameter):
            Transform(scale=scale)

    def test_invalid_rotation(self):
        """Test non-finite rotation is rejected."""
        with pytest.raises(InvalidParameter):
            Transform(rotate=float("nan"))

    def test_dict_round_trip(self):
        """Test dictionary serialization."""
        transform = Transform(rotate=90, flip_vertical=True, scale=0.5)
        assert Transform.from_dict(transform.to_dict()) == transform
        assert Transform.from_dict({}) == DEFAULT_TRANSFORM


class TestTransformEngine:
    """Test rotate, flip and scale."""

    def test_identity_returns_input(self, wide_buffer):
        """Test the identity transform returns the input."""
        assert apply_transform(wide_buffer, DEFAULT_TRANSFORM) is wide_buffer

    def test_flip_horizontal_swaps_columns(self):
        """Test horizontal flip mirrors columns."""
        buffer = RasterBuffer.from_pixels(2, 1, [(255, 0, 0), (0, 0, 255)])
        result = apply_transform(buffer, Transform(flip_horizontal=True))

        assert result.size == (2, 1)
        assert result.pixel(0, 0) == (0, 0, 255, 255)
        assert result.pixel(1, 0) == (255, 0, 0, 255)

    def test_flip_vertical_swaps_rows(self, wide_buffer):
        """Test vertical flip mirrors rows."""
        result = apply_transform(wide_buffer, Transform(flip_vertical=True))
        np.testing.assert_array_equal(result.pixels, wide_buffer.pixels[::-1])

    def test_double_flip_equals_half_turn(self, wide_buffer):
        """Test both flips equal a 180 degree rotation."""
        flipped = apply_transform(wide_buffer, Transform(flip_horizontal=True, flip_vertical=True))
        rotated = apply_transform(wide_buffer, Transform(rotate=180))
        assert flipped == rotated
        np.testing.assert_array_equal(rotated.pixels, wide_buffer.pixels[::-1, ::-1])

    def test_quarter_turn_is_clockwise(self, wide_buffer):
        """Test 90 degrees rotates clockwise and swaps dimensions."""
        result = apply_transform(wide_buffer, Transform(rotate=90))

        assert result.size == (2, 3)
        # Top-left moves to top-right
        assert result.pixel(1, 0) == wide_buffer.pixel(0, 0)
        assert result.pixel(0, 0) == wide_buffer.pixel(0, 1)
        np.testing.assert_array_equal(result.pixels, np.rot90(wide_buffer.pixels, k=-1))

    def test_full_turn_keeps_pixels(self, gradient_buffer):
        """Test quarter turns compose without resampling loss."""
        result = apply_transform(gradient_buffer, Transform(rotate=270))
        back = apply_transform(result, Transform(rotate=90))
        assert back == gradient_buffer

    def test_arbitrary_rotation_bounds(self):
        """Test 45 degree rotation grows the bounds."""
        buffer = RasterBuffer.blank(10, 10, (255, 255, 255, 255))
        result = apply_transform(buffer, Transform(rotate=45))

        assert result.size == (14, 14)
        # Corners are outside the rotated source
        assert result.pixel(0, 0)[3] == 0
        assert result.pixel(7, 7) == (255, 255, 255, 255)

    def test_scale_up(self, wide_buffer):
        """Test enlarging by scale."""
        result = apply_transform(wide_buffer, Transform(scale=2))
        assert result.size == (6, 4)

    def test_scale_down(self, gradient_buffer):
        """Test shrinking by scale."""
        result = TransformEngine().apply(gradient_buffer, Transform(scale=0.5))
        assert result.size == (20, 10)

    def test_empty_output_rejected(self):
        """Test scales that collapse the image are rejected."""
        with pytest.raises(InvalidParameter):
            rotated_bounds(10, 10, Transform(scale=0.01))

    def test_input_not_mutated(self, wide_buffer):
        """Test the source buffer is left untouched."""
        before = wide_buffer.to_array()
        apply_transform(wide_buffer, Transform(rotate=33, flip_horizontal=True))
        np.testing.assert_array_equal(wide_buffer.pixels, before)


class TestCrop:
    """Test rectangle extraction."""

    def test_full_bounds_returns_input(self, gradient_buffer):
        """Test a full-size crop returns the input."""
        crop = CropArea(0, 0, gradient_buffer.width, gradient_buffer.height)
        assert crop_image(gradient_buffer, crop) is gradient_buffer

    def test_extracts_region(self, gradient_buffer):
        """Test pixels are taken from the crop rectangle."""
        result = crop_image(gradient_buffer, CropArea(x=5, y=3, width=10, height=4))

        assert result.size == (10, 4)
        assert result.pixel(0, 0) == gradient_buffer.pixel(5, 3)
        assert result.pixel(9, 3) == gradient_buffer.pixel(14, 6)

    @pytest.mark.parametrize("crop", [
        CropArea(x=-1, y=0, width=5, height=5),
        CropArea(x=0, y=0, width=41, height=5),
        CropArea(x=30, y=15, width=11, height=5),
    ])
    def test_out_of_bounds_rejected(self, gradient_buffer, crop):
        """Test rectangles outside the source are rejected."""
        with pytest.raises(InvalidParameter):
            crop_image(gradient_buffer, crop)

    def test_zero_size_rejected(self):
        """Test empty rectangles are rejected."""
        with pytest.raises(InvalidParameter):
            CropArea(x=0, y=0, width=0, height=5)

    def test_non_integer_rejected(self):
        """Test fractional coordinates are rejected."""
        with pytest.raises(InvalidParameter):
            CropArea(x=0.5, y=0, width=5, height=5)

    def test_from_dict_rounds(self):
        """Test fractional coordinates are rounded when loading."""
        crop = CropArea.from_dict({'x': 1.4, 'y': 2.6, 'width': 10.2, 'height': 5})
        assert (crop.x, crop.y, crop.width, crop.height) == (1, 3, 10, 5)

    def test_from_dict_missing_key(self):
        """Test incomplete crop data is rejected."""
        with pytest.raises(InvalidParameter):
            CropArea.from_dict({'x': 0, 'y': 0, 'width': 5})

    def test_centered_crop_default(self):
        """Test the default 80% centered box."""
        crop = centered_crop(100, 50)
        assert (crop.x, crop.y, crop.width, crop.height) == (10, 5, 80, 40)

    def test_centered_crop_aspect_ratio(self):
        """Test the centered box honours an aspect ratio."""
        crop = centered_crop(100, 50, aspect_ratio=1.0)
        assert (crop.x, crop.y, crop.width, crop.height) == (30, 5, 40, 40)
        assert crop.fits_within(100, 50)


class TestResize:
    """Test resizing into a bounding box."""

    def test_fit_keeps_aspect(self):
        """Test fitting keeps proportions."""
        assert fit_dimensions(200, 100, 100, 100) == (100, 50)
        assert fit_dimensions(100, 200, 100, 100) == (50, 100)

    def test_fit_enlarges(self):
        """Test small images are scaled up."""
        assert fit_dimensions(10, 5, 100, 100) == (100, 50)

    def test_fit_ignores_aspect(self):
        """Test exact sizes when aspect is not kept."""
        assert fit_dimensions(200, 100, 30, 70, maintain_aspect_ratio=False) == (30, 70)

    def test_fit_minimum_one_pixel(self):
        """Test sizes never drop below one pixel."""
        assert fit_dimensions(1000, 1, 10, 10) == (10, 1)

    def test_fit_rejects_empty_target(self):
        """Test empty targets are rejected."""
        with pytest.raises(InvalidParameter):
            fit_dimensions(10, 10, 0, 10)

    def test_resize_buffer(self, gradient_buffer):
        """Test resizing a buffer."""
        result = resize_image(gradient_buffer, 10, 10)
        assert image_dimensions(result) == (10, 5)

    def test_resize_same_size_returns_input(self, gradient_buffer):
        """Test resizing to the same size returns the input."""
        assert resize_image(gradient_buffer, 40, 20) is gradient_buffer

    def test_resize_uniform_color(self, gray_buffer):
        """Test enlarging a flat image keeps its color."""
        result = resize_image(gray_buffer, 40, 40)
        assert result.size == (40, 40)
        assert np.all(result.pixels[:, :, :3] == 128)
        assert np.all(result.pixels[:, :, 3] == 255)
