"""Point decimation for traced regions."""
import math
from typing import List, Sequence

from palmap.types import Point, InvalidParameterError

DEFAULT_SIMPLIFY = 0.35

# Decimation step at simplify=0
MAX_STEP = 8


def decimation_step(simplify: float = DEFAULT_SIMPLIFY) -> int:
    """
    Keep-every-Nth step for a simplify ratio.

    ``max(1, floor((1 - simplify) * 8))``: simplify=0 gives 8, values
    close to 1 give 1 (no decimation).
    """
    if not 0.0 <= simplify <= 1.0:
        raise InvalidParameterError(f"simplify must be within [0, 1], got {simplify}")
    return max(1, int(math.floor((1.0 - simplify) * MAX_STEP)))


def simplify_points(points: Sequence[Point], simplify: float = DEFAULT_SIMPLIFY) -> List[Point]:
    """
    Decimate a point sequence by keeping every Nth point.

    Pure subsampling of the input order starting with the first point; no
    interpolation. Short sequences may come back with fewer than 3 points.

    Args:
        points: Ordered (x, y) points
        simplify: Ratio in [0, 1]; 0 keeps every 8th point, 1 keeps all

    Returns:
        Retained points in their original order
    """
    step = decimation_step(simplify)
    return list(points[::step])
