"""Frequency ranking of cluster centers."""
import logging
from typing import List

import numpy as np

from palmap.clustering import assign_to_centers, opaque_colors
from palmap.colors import rgb_to_hex
from palmap.types import PixelBuffer, PaletteEntry

logger = logging.getLogger(__name__)


def rank_clusters(centers: np.ndarray, samples: PixelBuffer) -> List[PaletteEntry]:
    """
    Rank centers by how many opaque samples are nearest to them.

    Args:
        centers: (K, 3) cluster centers
        samples: Sampled RGBA buffer; alpha=0 pixels are not counted

    Returns:
        One entry per center, most members first; equal counts keep
        ascending center index
    """
    colors = opaque_colors(samples)
    assignment = assign_to_centers(colors, centers)
    counts = np.bincount(assignment, minlength=len(centers)) if len(colors) else np.zeros(len(centers), dtype=np.intp)

    entries = [
        PaletteEntry(color=np.asarray(center), count=int(count), index=i)
        for i, (center, count) in enumerate(zip(centers, counts))
    ]
    # sorted() is stable, so ties stay in index order
    return sorted(entries, key=lambda e: e.count, reverse=True)


def ranked_hex_palette(entries: List[PaletteEntry]) -> List[str]:
    """
    Hex colors of ranked entries.

    Centers that round to an already listed hex are dropped.
    """
    palette = []
    for entry in entries:
        hex_color = rgb_to_hex(entry.color)
        if hex_color in palette:
            logger.debug(f"Center {entry.index} duplicates {hex_color}, skipped")
            continue
        palette.append(hex_color)
    return palette
