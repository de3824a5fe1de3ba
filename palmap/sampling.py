"""Strided pixel sampling to bound clustering cost."""
import logging
import math

import numpy as np

from palmap.types import PixelBuffer, InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_TARGET_PIXELS = 120000


def compute_step(width: int, height: int, target_pixels: int = DEFAULT_TARGET_PIXELS) -> int:
    """
    Integer stride so that roughly ``target_pixels`` pixels are sampled.

    ``step = max(1, floor(sqrt(W * H / target_pixels)))``, capped at the
    shorter image side so an extremely thin image still yields a sample.
    """
    if target_pixels < 1:
        raise InvalidParameterError(f"target_pixels must be >= 1, got {target_pixels}")
    if width < 1 or height < 1:
        return 1
    step = max(1, int(math.floor(math.sqrt(width * height / target_pixels))))
    return min(step, width, height)


def sample_pixels(source, target_pixels: int = DEFAULT_TARGET_PIXELS) -> PixelBuffer:
    """
    Downsample a pixel source onto a strided grid.

    Takes every ``step``-th pixel along both axes, reading one source row per
    sampled row.

    Args:
        source: Object with ``width``, ``height`` and ``get_row(y)`` returning
            the RGBA bytes of row ``y``
        target_pixels: Sample budget

    Returns:
        PixelBuffer of size ``(W // step) x (H // step)``
    """
    width, height = source.width, source.height
    step = compute_step(width, height, target_pixels)
    out_w, out_h = width // step, height // step

    if out_w == 0 or out_h == 0:
        logger.warning(f"Empty image {width}x{height}, nothing to sample")
        return PixelBuffer.empty()

    sampled = np.empty((out_h, out_w, 4), dtype=np.uint8)
    for row in range(out_h):
        pixels = np.asarray(source.get_row(row * step), dtype=np.uint8).reshape(-1, 4)
        sampled[row] = pixels[:out_w * step:step]

    logger.info(f"Sampled {out_w}x{out_h} pixels from {width}x{height} (step={step})")
    return PixelBuffer(out_w, out_h, sampled)
