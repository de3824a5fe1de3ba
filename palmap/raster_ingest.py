"""Raster image ingestion into RGBA pixel buffers."""
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image
from PIL import ImageOps

from palmap.types import PixelBuffer, VectorizationError


class ImageRowSource:
    """
    Pixel source over a decoded Pillow image, copied out one row at a time.

    The image is decoded and converted to RGBA up front; ``get_row(y)``
    copies a single row so the sampler never builds the full RGBA array.
    """

    def __init__(self, image: Image.Image):
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        self.image = image
        self.width, self.height = image.size

    def get_row(self, y: int) -> np.ndarray:
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} outside height {self.height}")
        row = self.image.crop((0, y, self.width, y + 1))
        return np.frombuffer(row.tobytes(), dtype=np.uint8)


def _open_rgba(path: Path, max_width: Optional[int]) -> Image.Image:
    with Image.open(path) as img:
        # Apply EXIF orientation transformation to handle rotation
        img = ImageOps.exif_transpose(img)
        img = img.convert('RGBA')

    if max_width is not None and img.width > max_width:
        height = max(1, round(img.height * max_width / img.width))
        # Nearest neighbour keeps flat colors exact
        img = img.resize((max_width, height), Image.Resampling.NEAREST)

    return img


def ingest(path: Union[str, Path], max_width: Optional[int] = None) -> PixelBuffer:
    """
    Ingest a raster image file as an RGBA buffer.

    Args:
        path: Path to image file
        max_width: Optional width limit; wider images are downsized

    Returns:
        PixelBuffer with the image pixels

    Raises:
        FileNotFoundError: If file doesn't exist
        VectorizationError: If file cannot be loaded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise VectorizationError(f"Path is not a file: {path}")

    try:
        img = _open_rgba(path, max_width)
    except (IOError, OSError) as e:
        raise VectorizationError(f"Failed to load image {path}: {e}") from e

    width, height = img.size
    return PixelBuffer(width, height, np.asarray(img, dtype=np.uint8))


def open_row_source(path: Union[str, Path], max_width: Optional[int] = None) -> ImageRowSource:
    """Open an image file as a row-by-row pixel source."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")
    try:
        return ImageRowSource(_open_rgba(path, max_width))
    except (IOError, OSError) as e:
        raise VectorizationError(f"Failed to load image {path}: {e}") from e


def ingest_from_array(image: np.ndarray) -> PixelBuffer:
    """
    Create a PixelBuffer from a numpy array.

    Args:
        image: uint8 image array (H, W, 3) or (H, W, 4); RGB gets opaque alpha

    Returns:
        PixelBuffer
    """
    if image.ndim != 3:
        raise VectorizationError(f"Expected 3D array, got {image.ndim}D")

    height, width, channels = image.shape
    if channels == 3:
        alpha = np.full((height, width, 1), 255, dtype=np.uint8)
        image = np.concatenate([image.astype(np.uint8), alpha], axis=2)
    elif channels != 4:
        raise VectorizationError(f"Expected 3 or 4 channels, got {channels}")

    return PixelBuffer(width, height, image)


def save_buffer(buffer: PixelBuffer, output_path: Union[str, Path]) -> None:
    """Save a pixel buffer as PNG."""
    Image.fromarray(buffer.as_array()).save(output_path)
