"""Core types for palette extraction and region tracing."""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

# Type aliases
Point = Tuple[int, int]
RGB = Tuple[int, int, int]


class VectorizationError(Exception):
    """Base exception for vectorization errors."""
    pass


class InvalidParameterError(VectorizationError, ValueError):
    """Raised when a configuration value or argument is out of range."""
    pass


class BackendUnavailableError(VectorizationError):
    """Raised when the requested vectorization backend is not registered."""
    pass


@dataclass
class PixelBuffer:
    """Flat row-major RGBA pixel buffer.

    ``data`` holds ``width * height * 4`` unsigned bytes; the channels of
    pixel (x, y) start at ``(y * width + x) * 4``.
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidParameterError(
                f"Image dimensions must be non-negative, got {self.width}x{self.height}"
            )
        self.data = np.ascontiguousarray(self.data, dtype=np.uint8).reshape(-1)
        expected = self.width * self.height * 4
        if self.data.size != expected:
            raise InvalidParameterError(
                f"Buffer length {self.data.size} does not match {self.width}x{self.height}x4"
            )

    @classmethod
    def empty(cls, width: int = 0, height: int = 0) -> "PixelBuffer":
        """Transparent black buffer of the given size."""
        return cls(width, height, np.zeros(width * height * 4, dtype=np.uint8))

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def index(self, x: int, y: int) -> int:
        """Offset of the first channel of pixel (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height}")
        return (y * self.width + x) * 4

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        i = self.index(x, y)
        r, g, b, a = self.data[i:i + 4]
        return int(r), int(g), int(b), int(a)

    def get_row(self, y: int) -> np.ndarray:
        """RGBA bytes of row ``y`` (length ``width * 4``)."""
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} outside height {self.height}")
        start = y * self.width * 4
        return self.data[start:start + self.width * 4]

    def as_array(self) -> np.ndarray:
        """View of the buffer as an (H, W, 4) array."""
        return self.data.reshape(self.height, self.width, 4)


@dataclass
class ClusteringResult:
    """Final cluster centers and the last iteration's assignment."""
    centers: np.ndarray  # (K, 3) float64
    labels: np.ndarray   # (N,) int, -1 for transparent samples


@dataclass
class PaletteEntry:
    """Cluster center with its membership count."""
    color: np.ndarray
    count: int
    index: int


@dataclass
class Polygon:
    """Traced region emitted as a flat-color polygon."""
    fill: str
    points: List[Point] = field(default_factory=list)
    area: float = 0.0


# External option names accepted by VectorizeConfig.from_options
_OPTION_ALIASES = {
    "targetPixels": "target_pixels",
    "minArea": "min_area",
}


@dataclass
class VectorizeConfig:
    """Configuration for palette extraction and vectorization."""

    # Sampling
    target_pixels: int = 120000

    # Clustering
    k: int = 10
    iterations: int = 8

    # Tracing
    simplify: float = 0.35
    min_area: float = 8.0
    palette: Optional[List[str]] = None

    def __post_init__(self):
        """Validate ranges and normalize the palette filter."""
        from palmap.colors import normalize_palette

        if self.target_pixels < 1:
            raise InvalidParameterError(f"target_pixels must be >= 1, got {self.target_pixels}")
        if self.k < 1:
            raise InvalidParameterError(f"k must be >= 1, got {self.k}")
        if self.iterations < 0:
            raise InvalidParameterError(f"iterations must be >= 0, got {self.iterations}")
        if not 0.0 <= self.simplify <= 1.0:
            raise InvalidParameterError(f"simplify must be within [0, 1], got {self.simplify}")
        if self.min_area < 0:
            raise InvalidParameterError(f"min_area must be >= 0, got {self.min_area}")
        if self.palette is not None:
            self.palette = normalize_palette(self.palette)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "VectorizeConfig":
        """Build a config from external option names (``minArea``) or field names."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise InvalidParameterError(f"Unknown option: {key}")
            kwargs[name] = value
        return cls(**kwargs)
