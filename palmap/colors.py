"""Hex color helpers."""
import re
from typing import Iterable, List, Sequence

import numpy as np

from palmap.types import RGB, InvalidParameterError

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def rgb_to_hex(rgb: Sequence[float]) -> str:
    """
    Format an RGB triple as uppercase ``#RRGGBB``.

    Real-valued channels are rounded half up and clamped to [0, 255];
    any alpha channel is ignored.
    """
    r, g, b = [int(min(255, max(0, np.floor(float(c) + 0.5)))) for c in rgb[:3]]
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Parse ``#RRGGBB`` (leading ``#`` optional, any case)."""
    match = _HEX_RE.match((hex_color or "").strip())
    if not match:
        raise InvalidParameterError(f"Invalid hex color: {hex_color!r}")
    n = int(match.group(1), 16)
    return (n >> 16) & 255, (n >> 8) & 255, n & 255


def normalize_hex(hex_color: str) -> str:
    """Canonical uppercase ``#RRGGBB`` form of a hex color."""
    return rgb_to_hex(hex_to_rgb(hex_color))


def normalize_palette(palette: Iterable[str]) -> List[str]:
    """Uppercase and de-duplicate a palette, keeping first-seen order."""
    seen = set()
    result = []
    for hex_color in palette:
        normalized = normalize_hex(hex_color)
        if normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


def pack_rgb(pixels: np.ndarray) -> np.ndarray:
    """
    Pack the RGB channels of an (N, 4) or (N, 3) array into 24-bit ints.

    Two pixels pack to the same value exactly when their hex strings match.
    """
    pixels = pixels.astype(np.int64)
    return (pixels[:, 0] << 16) | (pixels[:, 1] << 8) | pixels[:, 2]


def packed_to_hex(value: int) -> str:
    """Format a packed 24-bit color as ``#RRGGBB``."""
    return f"#{int(value):06X}"
