"""
Tests for image file loading and saving.
"""

import numpy as np
import pytest
from PIL import Image

from photoedit.errors import DecodeError, EncodeError
from photoedit.processing.raster import RasterBuffer
from photoedit.io import (
    load_image, save_image, decode_image, encode_image,
    from_pil, to_pil, find_images, format_for_path,
)


class TestLoadSave:
    """Test file round trips through Pillow."""

    def test_png_round_trip_is_lossless(self, gradient_buffer, tmp_path):
        """Test PNG files load back pixel for pixel."""
        path = save_image(gradient_buffer, tmp_path / "out.png")
        assert load_image(path) == gradient_buffer

    def test_png_keeps_alpha(self, tmp_path):
        """Test PNG keeps transparency."""
        buffer = RasterBuffer.blank(4, 4, (10, 20, 30, 40))
        path = save_image(buffer, tmp_path / "alpha.png")
        assert load_image(path).pixel(0, 0) == (10, 20, 30, 40)

    def test_jpeg_is_opaque(self, gradient_buffer, tmp_path):
        """Test JPEG output is flattened to opaque."""
        path = save_image(gradient_buffer, tmp_path / "out.jpg", quality=95)
        loaded = load_image(path)

        assert loaded.size == gradient_buffer.size
        assert np.all(loaded.pixels[:, :, 3] == 255)

    def test_explicit_format_overrides_extension(self, gray_buffer, tmp_path):
        """Test an explicit format wins over the extension."""
        path = save_image(gray_buffer, tmp_path / "out.img", image_format="PNG")
        with Image.open(path) as image:
            assert image.format == "PNG"

    def test_unsupported_extension(self, gray_buffer, tmp_path):
        """Test unknown extensions are an encode error."""
        with pytest.raises(EncodeError):
            save_image(gray_buffer, tmp_path / "out.xyz")

    def test_invalid_quality(self, gray_buffer):
        """Test quality outside 1-100 is rejected."""
        with pytest.raises(EncodeError):
            encode_image(gray_buffer, "JPEG", quality=0)

    def test_missing_file(self, tmp_path):
        """Test a missing file is a decode error."""
        with pytest.raises(DecodeError):
            load_image(tmp_path / "missing.png")

    def test_corrupt_file(self, tmp_path):
        """Test a corrupt file is a decode error."""
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        with pytest.raises(DecodeError):
            load_image(path)


class TestCodec:
    """Test in-memory encoding and Pillow conversion."""

    def test_decode_encoded_bytes(self, primaries_buffer):
        """Test in-memory encode and decode."""
        data = encode_image(primaries_buffer, "PNG")
        assert decode_image(data) == primaries_buffer

    def test_decode_garbage(self):
        """Test random bytes are a decode error."""
        with pytest.raises(DecodeError):
            decode_image(b"\x00\x01\x02")

    def test_rgb_gains_alpha(self):
        """Test RGB images gain an opaque alpha channel."""
        image = Image.new("RGB", (3, 2), (1, 2, 3))
        buffer = from_pil(image)
        assert buffer.size == (3, 2)
        assert buffer.pixel(2, 1) == (1, 2, 3, 255)

    def test_to_pil(self, primaries_buffer):
        """Test conversion to a Pillow image."""
        image = to_pil(primaries_buffer)
        assert image.mode == "RGBA"
        assert image.size == (2, 2)
        assert image.getpixel((1, 0)) == (0, 255, 0, 255)

    def test_format_for_path(self):
        """Test format lookup by extension."""
        assert format_for_path("a.JPG") == "JPEG"
        assert format_for_path("b.webp") == "WEBP"
        with pytest.raises(EncodeError):
            format_for_path("noext")


class TestFindImages:
    """Test directory scanning."""

    def test_finds_supported_files_sorted(self, gray_buffer, tmp_path):
        """Test only supported files are found, sorted by name."""
        save_image(gray_buffer, tmp_path / "b.png")
        save_image(gray_buffer, tmp_path / "a.jpg")
        (tmp_path / "notes.txt").write_text("skip me")
        (tmp_path / "nested.png").mkdir()

        found = find_images(tmp_path)
        assert [p.name for p in found] == ["a.jpg", "b.png"]
