"""palmap: ranked color palettes and flat-color polygon tracing."""
from palmap.types import (
    PixelBuffer,
    PaletteEntry,
    Polygon,
    ClusteringResult,
    VectorizeConfig,
    VectorizationError,
    InvalidParameterError,
    BackendUnavailableError,
)
from palmap.pipeline import Vectorizer, process_image

__version__ = "0.1.0"

__all__ = [
    "PixelBuffer",
    "PaletteEntry",
    "Polygon",
    "ClusteringResult",
    "VectorizeConfig",
    "VectorizationError",
    "InvalidParameterError",
    "BackendUnavailableError",
    "Vectorizer",
    "process_image",
]
