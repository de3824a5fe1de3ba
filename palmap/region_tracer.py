"""Connected-component region tracing over full-resolution pixels."""
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from palmap.colors import pack_rgb, packed_to_hex, hex_to_rgb
from palmap.simplify import simplify_points, DEFAULT_SIMPLIFY
from palmap.types import PixelBuffer, Point, Polygon

logger = logging.getLogger(__name__)

DEFAULT_MIN_AREA = 8.0


def shoelace_area(points: Sequence[Point]) -> float:
    """
    Polygon area from an ordered vertex sequence (shoelace formula).

    Returns 0.0 for fewer than 3 points.
    """
    if len(points) < 3:
        return 0.0
    pts = np.asarray(points, dtype=np.float64)
    x, y = pts[:, 0], pts[:, 1]
    return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2.0)


def flood_collect(
    colors: List[int],
    seen: bytearray,
    width: int,
    height: int,
    start: int
) -> List[Point]:
    """
    Collect the 4-connected same-color region containing ``start``.

    Depth-first with an explicit stack. Pixels are marked in ``seen`` when
    pushed, so each pixel is collected at most once across calls sharing
    the same ``seen``. Neighbors are pushed up, down, left, right; the
    returned points follow pop order.

    Args:
        colors: Packed RGB value per pixel, row-major
        seen: Visited marker per pixel, updated in place
        width: Image width
        height: Image height
        start: Flat index of the seed pixel

    Returns:
        (x, y) points in visitation order
    """
    target = colors[start]
    seen[start] = 1
    stack = [start]
    points = []

    while stack:
        i = stack.pop()
        y, x = divmod(i, width)
        points.append((x, y))

        for n, inside in (
            (i - width, y > 0),
            (i + width, y < height - 1),
            (i - 1, x > 0),
            (i + 1, x < width - 1),
        ):
            if inside and not seen[n] and colors[n] == target:
                seen[n] = 1
                stack.append(n)

    return points


def collect_regions(
    buffer: PixelBuffer,
    palette: Optional[Iterable[str]] = None
) -> Iterator[Tuple[str, List[Point]]]:
    """
    Yield every same-color region in row-major discovery order.

    Alpha is ignored when matching. With a palette filter, pixels whose
    exact hex color is not in the palette are marked visited and skipped.

    Args:
        buffer: Full-resolution RGBA buffer
        palette: Optional hex colors allowed to seed regions (any case)

    Yields:
        (fill hex, points) for each region
    """
    width, height = buffer.width, buffer.height
    if buffer.pixel_count == 0:
        return

    colors = pack_rgb(buffer.data.reshape(-1, 4)).tolist()
    allowed = None
    if palette is not None:
        allowed = {(r << 16) | (g << 8) | b for r, g, b in map(hex_to_rgb, palette)}

    # Owned by this scan only
    seen = bytearray(width * height)

    for start in range(width * height):
        if seen[start]:
            continue
        if allowed is not None and colors[start] not in allowed:
            seen[start] = 1
            continue
        yield packed_to_hex(colors[start]), flood_collect(colors, seen, width, height, start)


def trace_regions(
    buffer: PixelBuffer,
    palette: Optional[Iterable[str]] = None,
    min_area: float = DEFAULT_MIN_AREA,
    simplify: float = DEFAULT_SIMPLIFY
) -> List[Polygon]:
    """
    Trace same-color regions into simplified polygons.

    Regions with fewer than 3 points, or whose shoelace area over the raw
    point order is below ``min_area``, are discarded.

    Args:
        buffer: Full-resolution RGBA buffer
        palette: Optional hex filter
        min_area: Minimum polygon area in px^2
        simplify: Decimation ratio passed to the simplifier

    Returns:
        Polygons in discovery order
    """
    if palette is not None:
        palette = list(palette)

    polygons = []
    discarded = 0
    for fill, points in collect_regions(buffer, palette):
        if len(points) < 3:
            discarded += 1
            continue
        area = shoelace_area(points)
        if area < min_area:
            logger.debug(f"Region {fill} at {points[0]}: area {area:.1f} below {min_area}")
            discarded += 1
            continue
        polygons.append(Polygon(fill=fill, points=simplify_points(points, simplify), area=area))

    logger.info(f"Traced {len(polygons)} regions ({discarded} discarded)")
    return polygons
