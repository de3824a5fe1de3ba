"""K-means color clustering over sampled RGBA pixels."""
import logging
from collections import Counter
from typing import Dict, List

import numpy as np
from scipy.spatial.distance import cdist

from palmap.colors import pack_rgb
from palmap.types import PixelBuffer, ClusteringResult, InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_K = 10
DEFAULT_ITERATIONS = 8


def opaque_colors(samples: PixelBuffer) -> np.ndarray:
    """RGB rows of every sample whose alpha is non-zero, in scan order."""
    pixels = samples.data.reshape(-1, 4)
    return pixels[pixels[:, 3] != 0, :3]


def assign_to_centers(colors: np.ndarray, centers: np.ndarray) -> np.ndarray:
    """
    Index of the nearest center for each color.

    Uses squared Euclidean RGB distance; ties go to the lowest center index.

    Args:
        colors: (N, 3) array of RGB values
        centers: (K, 3) array of cluster centers

    Returns:
        (N,) array of center indices
    """
    if len(colors) == 0 or len(centers) == 0:
        return np.zeros(len(colors), dtype=np.intp)
    distances = cdist(colors.astype(np.float64), centers.astype(np.float64), 'sqeuclidean')
    return np.argmin(distances, axis=1)


def seed_centers(colors: np.ndarray, k: int) -> np.ndarray:
    """
    Pick up to ``k`` distinct starting centers.

    Colors are bucketed into a 5-bit-per-channel histogram. Buckets are taken
    by count (ties in first-seen order) and each contributes the first exact
    color seen in it. When there are fewer buckets than ``k`` the remaining
    seeds are the most frequent exact colors not yet chosen.

    Args:
        colors: (N, 3) array of opaque RGB samples in scan order
        k: Requested number of centers

    Returns:
        (min(k, distinct colors), 3) float64 array
    """
    if k < 1:
        raise InvalidParameterError(f"k must be >= 1, got {k}")
    if len(colors) == 0:
        return np.zeros((0, 3), dtype=np.float64)

    packed = pack_rgb(colors).tolist()
    buckets = ((colors.astype(np.int64) >> 3) * np.array([1 << 10, 1 << 5, 1])).sum(axis=1).tolist()

    bucket_counts = Counter(buckets)
    representative: Dict[int, int] = {}
    for key, value in zip(buckets, packed):
        representative.setdefault(key, value)

    # Counter.most_common keeps insertion order among equal counts
    chosen: List[int] = [representative[key] for key, _ in bucket_counts.most_common(k)]

    if len(chosen) < k:
        taken = set(chosen)
        for value, _ in Counter(packed).most_common():
            if len(chosen) == k:
                break
            if value not in taken:
                taken.add(value)
                chosen.append(value)

    seeds = np.array(chosen, dtype=np.int64)
    return np.stack([(seeds >> 16) & 255, (seeds >> 8) & 255, seeds & 255], axis=1).astype(np.float64)


def kmeans_colors(
    samples: PixelBuffer,
    k: int = DEFAULT_K,
    iterations: int = DEFAULT_ITERATIONS
) -> ClusteringResult:
    """
    Cluster sample colors with a fixed number of Lloyd iterations.

    Each iteration assigns every opaque sample (alpha != 0) to its nearest
    center, then moves each center to the mean RGB of its members. Centers
    with no members keep their previous value. There is no convergence
    check; exactly ``iterations`` rounds run.

    Args:
        samples: Sampled RGBA buffer
        k: Number of clusters (degraded to the number of distinct colors)
        iterations: Number of assignment/update rounds

    Returns:
        ClusteringResult with (K', 3) centers and the last assignment
    """
    if k < 1:
        raise InvalidParameterError(f"k must be >= 1, got {k}")
    if iterations < 0:
        raise InvalidParameterError(f"iterations must be >= 0, got {iterations}")

    alpha = samples.data.reshape(-1, 4)[:, 3]
    colors = opaque_colors(samples).astype(np.float64)
    centers = seed_centers(colors, k)

    if len(centers) < k:
        logger.warning(f"Only {len(centers)} distinct colors available, requested k={k}")

    labels = np.full(alpha.shape[0], -1, dtype=np.intp)
    if len(centers) == 0:
        return ClusteringResult(centers=centers, labels=labels)

    assignment = np.zeros(len(colors), dtype=np.intp)
    for it in range(iterations):
        assignment = assign_to_centers(colors, centers)
        counts = np.bincount(assignment, minlength=len(centers))
        sums = np.zeros_like(centers)
        np.add.at(sums, assignment, colors)
        filled = counts > 0
        centers[filled] = sums[filled] / counts[filled, None]
        logger.debug(f"Iteration {it + 1}/{iterations}: {int(filled.sum())} non-empty clusters")

    if iterations > 0:
        labels[alpha != 0] = assignment

    logger.info(f"Clustered {len(colors)} samples into {len(centers)} centers")
    return ClusteringResult(centers=centers, labels=labels)
