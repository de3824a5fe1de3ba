"""Palette extraction: sample, cluster, rank."""
import logging
from typing import List

from palmap.clustering import kmeans_colors, DEFAULT_K, DEFAULT_ITERATIONS
from palmap.ranking import rank_clusters, ranked_hex_palette
from palmap.sampling import sample_pixels, DEFAULT_TARGET_PIXELS

logger = logging.getLogger(__name__)


def extract_palette(
    source,
    k: int = DEFAULT_K,
    iterations: int = DEFAULT_ITERATIONS,
    target_pixels: int = DEFAULT_TARGET_PIXELS
) -> List[str]:
    """
    Extract a frequency-ranked palette from a pixel source.

    Args:
        source: Pixel source (``width``, ``height``, ``get_row``)
        k: Palette size
        iterations: Clustering rounds
        target_pixels: Sampling budget

    Returns:
        Uppercase ``#RRGGBB`` strings, most frequent first, at most ``k``
    """
    samples = sample_pixels(source, target_pixels)
    if samples.pixel_count == 0:
        return []

    result = kmeans_colors(samples, k, iterations)
    entries = rank_clusters(result.centers, samples)
    palette = ranked_hex_palette(entries)

    logger.info(f"Palette: {', '.join(palette) if palette else '(empty)'}")
    return palette
