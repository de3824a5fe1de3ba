"""Palette extraction and vectorization pipeline."""
import asyncio
import logging
import time
from pathlib import Path
from typing import List, Optional, Union

from palmap.backends import get_backend, DEFAULT_BACKEND
from palmap.mapping import map_to_palette
from palmap.palette import extract_palette
from palmap.raster_ingest import ingest
from palmap.svg_export import polygons_to_svg, save_svg
from palmap.types import PixelBuffer, Polygon, VectorizeConfig, VectorizationError

logger = logging.getLogger(__name__)


class Vectorizer:
    """Extracts palettes and converts pixel buffers to flat-color SVG."""

    def __init__(self, config: Optional[VectorizeConfig] = None, backend: str = DEFAULT_BACKEND):
        """
        Initialize vectorizer.

        Args:
            config: Configuration. Uses defaults if None.
            backend: Name of the registered tracing backend
        """
        self.config = config or VectorizeConfig()
        self.backend = backend

    def palette(self, source) -> List[str]:
        """Frequency-ranked hex palette of a pixel source."""
        return extract_palette(
            source,
            k=self.config.k,
            iterations=self.config.iterations,
            target_pixels=self.config.target_pixels,
        )

    def trace(self, buffer: PixelBuffer) -> List[Polygon]:
        """Trace a buffer into simplified polygons with the configured backend."""
        backend = get_backend(self.backend)
        try:
            return backend(
                buffer,
                palette=self.config.palette,
                min_area=self.config.min_area,
                simplify=self.config.simplify,
            )
        except VectorizationError:
            raise
        except Exception as e:
            raise VectorizationError(f"Backend '{self.backend}' failed: {e}") from e

    def vectorize(self, buffer: PixelBuffer) -> str:
        """
        Convert a pixel buffer to an SVG document.

        Blocks until tracing is complete.

        Raises:
            BackendUnavailableError: If the backend is not registered
            VectorizationError: If tracing fails
        """
        start_time = time.time()
        polygons = self.trace(buffer)
        svg = polygons_to_svg(polygons, buffer.width, buffer.height)
        logger.info(
            f"Vectorized {buffer.width}x{buffer.height} into {len(polygons)} polygons "
            f"in {time.time() - start_time:.2f}s"
        )
        return svg

    async def vectorize_async(self, buffer: PixelBuffer) -> str:
        """Awaitable ``vectorize``, run in the event loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.vectorize, buffer)

    def process(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        auto_palette: bool = False,
        max_width: Optional[int] = None,
        dither: bool = False
    ) -> str:
        """
        Process an image file into SVG.

        Args:
            input_path: Path to input image
            output_path: Optional path for output SVG
            auto_palette: Map the image onto its own extracted palette first
            max_width: Optional width limit applied on load
            dither: Use error diffusion when mapping onto the palette

        Returns:
            SVG string

        Raises:
            FileNotFoundError: If input file doesn't exist
            VectorizationError: If processing fails
        """
        try:
            buffer = ingest(input_path, max_width=max_width)
            logger.info(f"Loaded {input_path}: {buffer.width}x{buffer.height}")

            if auto_palette:
                palette = self.config.palette or self.palette(buffer)
                if palette:
                    buffer = map_to_palette(buffer, palette, dither=dither)

            svg = self.vectorize(buffer)

            if output_path:
                save_svg(svg, output_path)

            return svg

        except (FileNotFoundError, VectorizationError):
            raise
        except Exception as e:
            raise VectorizationError(f"Processing {input_path} failed: {e}") from e


def process_image(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[VectorizeConfig] = None,
    auto_palette: bool = False,
    dither: bool = False
) -> str:
    """
    Process an image through the vectorization pipeline.

    Convenience function for one-off processing.

    Example:
        >>> svg = process_image("input.png", "output.svg")
        >>> svg = process_image("input.jpg", config=VectorizeConfig(k=6), auto_palette=True)
    """
    return Vectorizer(config).process(
        input_path, output_path, auto_palette=auto_palette, dither=dither
    )
