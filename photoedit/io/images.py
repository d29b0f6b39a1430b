"""
Image file I/O for PhotoEdit

Decodes files into RasterBuffers and encodes RasterBuffers back to files
through Pillow. The processing core never calls this module; it is used by
the command line interface and by callers that start from files.
"""

import io
import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError, EncodeError
from ..processing.raster import RasterBuffer

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.webp', '.bmp', '.tif', '.tiff', '.gif'}

# Matches the editor's historical JPEG export quality of 0.9
DEFAULT_JPEG_QUALITY = 90

_FORMAT_BY_EXTENSION = {
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
    '.png': 'PNG',
    '.webp': 'WEBP',
    '.bmp': 'BMP',
    '.tif': 'TIFF',
    '.tiff': 'TIFF',
    '.gif': 'GIF',
}

# Formats without an alpha channel
_OPAQUE_FORMATS = {'JPEG', 'BMP'}


def from_pil(image: Image.Image) -> RasterBuffer:
    """Convert a Pillow image to a RasterBuffer."""
    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    return RasterBuffer(np.asarray(image, dtype=np.uint8))


def to_pil(buffer: RasterBuffer) -> Image.Image:
    """Convert a RasterBuffer to a Pillow RGBA image."""
    return Image.fromarray(buffer.to_array())


def decode_image(data: bytes) -> RasterBuffer:
    """
    Decode encoded image bytes.

    Raises:
        DecodeError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return from_pil(image)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e


def load_image(path: Union[str, Path]) -> RasterBuffer:
    """
    Load an image file.

    Raises:
        DecodeError: If the file is missing or not a readable image
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            image.load()
            buffer = from_pil(image)
    except FileNotFoundError as e:
        raise DecodeError(f"Image file not found: {path}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Failed to decode {path}: {e}") from e

    logger.debug(f"Loaded {path} ({buffer.width}x{buffer.height})")
    return buffer


def format_for_path(path: Union[str, Path]) -> str:
    """
    Pillow format name for a file extension.

    Raises:
        EncodeError: If the extension is not supported
    """
    suffix = Path(path).suffix.lower()
    if suffix not in _FORMAT_BY_EXTENSION:
        raise EncodeError(f"Unsupported output extension: {suffix or '(none)'}")
    return _FORMAT_BY_EXTENSION[suffix]


def _prepare_for_format(buffer: RasterBuffer, image_format: str) -> Image.Image:
    image = to_pil(buffer)
    if image_format.upper() in _OPAQUE_FORMATS:
        # Flatten over black, like a canvas export to JPEG
        background = Image.new('RGBA', image.size, (0, 0, 0, 255))
        image = Image.alpha_composite(background, image).convert('RGB')
    return image


def encode_image(buffer: RasterBuffer, image_format: str = 'PNG',
                 quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """
    Encode a buffer to bytes.

    Args:
        buffer: Image to encode
        image_format: Pillow format name (PNG, JPEG, WEBP, ...)
        quality: Lossy quality 1-100

    Raises:
        EncodeError: If Pillow cannot write the format
    """
    if not 1 <= quality <= 100:
        raise EncodeError(f"quality must be 1-100, got {quality}")

    image = _prepare_for_format(buffer, image_format)
    output = io.BytesIO()
    try:
        image.save(output, format=image_format.upper(), quality=quality)
    except (KeyError, OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode image as {image_format}: {e}") from e
    return output.getvalue()


def save_image(buffer: RasterBuffer, path: Union[str, Path],
               image_format: Optional[str] = None,
               quality: int = DEFAULT_JPEG_QUALITY) -> Path:
    """
    Write a buffer to ``path``.

    Args:
        buffer: Image to write
        path: Destination file
        image_format: Pillow format name; derived from the extension if omitted
        quality: Lossy quality 1-100

    Returns:
        The written path

    Raises:
        EncodeError: If the format is unsupported or the file cannot be written
    """
    path = Path(path)
    image_format = image_format or format_for_path(path)
    data = encode_image(buffer, image_format, quality)

    try:
        path.write_bytes(data)
    except OSError as e:
        raise EncodeError(f"Failed to write {path}: {e}") from e

    logger.debug(f"Saved {buffer.width}x{buffer.height} image to {path}")
    return path


def find_images(directory: Union[str, Path]) -> List[Path]:
    """Supported image files directly inside ``directory``, sorted by name."""
    directory = Path(directory)
    return sorted(p for p in directory.iterdir()
                  if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS)
