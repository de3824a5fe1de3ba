"""Map pixels onto a fixed palette."""
import logging
from typing import Iterable

import numpy as np

from palmap.clustering import assign_to_centers
from palmap.colors import hex_to_rgb
from palmap.types import PixelBuffer, InvalidParameterError

logger = logging.getLogger(__name__)

# Floyd-Steinberg weights as (dx, dy, weight)
DIFFUSION = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


def map_to_palette(
    buffer: PixelBuffer,
    palette: Iterable[str],
    dither: bool = False
) -> PixelBuffer:
    """
    Replace each pixel's RGB with the nearest palette color.

    Nearest is squared Euclidean RGB distance, ties to the earlier palette
    entry. Alpha is preserved and fully transparent pixels are left as-is.
    The result contains only exact palette colors, ready for tracing.

    Args:
        buffer: RGBA buffer
        palette: Hex colors
        dither: Diffuse each pixel's quantization error to its unvisited
            neighbors (Floyd-Steinberg, row-major)

    Returns:
        New PixelBuffer
    """
    rgb = np.array([hex_to_rgb(h) for h in palette], dtype=np.uint8).reshape(-1, 3)
    if len(rgb) == 0:
        raise InvalidParameterError("Cannot map onto an empty palette")

    pixels = buffer.data.reshape(-1, 4).copy()
    opaque = pixels[:, 3] != 0
    if dither:
        _diffuse(pixels, opaque, buffer.width, buffer.height, rgb)
    elif np.any(opaque):
        nearest = assign_to_centers(pixels[opaque, :3], rgb)
        pixels[opaque, :3] = rgb[nearest]

    logger.info(
        f"Mapped {int(opaque.sum())} pixels onto {len(rgb)} colors"
        + (" with dithering" if dither else "")
    )
    return PixelBuffer(buffer.width, buffer.height, pixels)


def _diffuse(
    pixels: np.ndarray,
    opaque: np.ndarray,
    width: int,
    height: int,
    rgb: np.ndarray
) -> None:
    """Error-diffusion mapping of ``pixels`` in place; only opaque pixels take or pass error."""
    palette_f = rgb.astype(np.float64)
    work = pixels[:, :3].astype(np.float64)

    for y in range(height):
        for x in range(width):
            i = y * width + x
            if not opaque[i]:
                continue
            value = np.clip(work[i], 0.0, 255.0)
            best = int(np.argmin(((palette_f - value) ** 2).sum(axis=1)))
            pixels[i, :3] = rgb[best]
            error = value - palette_f[best]

            for dx, dy, weight in DIFFUSION:
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and ny < height:
                    j = ny * width + nx
                    if opaque[j]:
                        work[j] += error * weight
