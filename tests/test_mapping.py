"""Tests for palette mapping."""
import numpy as np
import pytest

from palmap.mapping import map_to_palette
from palmap.raster_ingest import ingest_from_array
from palmap.region_tracer import trace_regions
from palmap.types import InvalidParameterError

from conftest import solid_image


class TestMapToPalette:
    """Test map_to_palette."""

    def test_nearest_color(self):
        image = solid_image(3, 1, (250, 10, 5))
        image[0, 1, :3] = (20, 20, 230)
        image[0, 2, :3] = (128, 128, 128)
        buffer = ingest_from_array(image)

        mapped = map_to_palette(buffer, ["#FF0000", "#0000FF", "#808080"])

        assert mapped.pixel(0, 0) == (255, 0, 0, 255)
        assert mapped.pixel(1, 0) == (0, 0, 255, 255)
        assert mapped.pixel(2, 0) == (128, 128, 128, 255)

    def test_alpha_preserved(self):
        image = solid_image(2, 1, (250, 10, 5), alpha=120)
        image[0, 1] = (1, 2, 3, 0)
        buffer = ingest_from_array(image)

        mapped = map_to_palette(buffer, ["#FF0000"])

        assert mapped.pixel(0, 0) == (255, 0, 0, 120)
        assert mapped.pixel(1, 0) == (1, 2, 3, 0)

    def test_input_untouched(self):
        buffer = ingest_from_array(solid_image(2, 2, (9, 9, 9)))
        before = buffer.data.copy()

        map_to_palette(buffer, ["#000000"])

        np.testing.assert_array_equal(buffer.data, before)

    def test_mapped_image_traces_with_filter(self):
        rng = np.random.default_rng(2)
        image = solid_image(8, 8, (0, 0, 0))
        image[..., :3] = rng.integers(0, 40, size=(8, 8, 3))
        image[4:, :, :3] += 200
        buffer = ingest_from_array(image)
        palette = ["#101010", "#F0F0F0"]

        polygons = trace_regions(map_to_palette(buffer, palette), palette=palette, min_area=0, simplify=1)

        assert [p.fill for p in polygons] == palette

    def test_empty_palette(self):
        buffer = ingest_from_array(solid_image(1, 1, (0, 0, 0)))

        with pytest.raises(InvalidParameterError):
            map_to_palette(buffer, [])


class TestDither:
    """Test map_to_palette with error diffusion."""

    BLACK_WHITE = ["#000000", "#FFFFFF"]

    def _gray(self, width, height, value):
        return ingest_from_array(solid_image(width, height, (value, value, value)))

    def test_mid_gray_mixes_both_colors(self):
        buffer = self._gray(8, 8, 128)

        flat = map_to_palette(buffer, self.BLACK_WHITE)
        dithered = map_to_palette(buffer, self.BLACK_WHITE, dither=True)

        assert np.unique(flat.as_array()[..., :3].reshape(-1, 3), axis=0).tolist() == [[255, 255, 255]]
        white = dithered.as_array()[..., 0] == 255
        assert 0.3 < white.mean() < 0.7

    def test_gradient(self):
        image = solid_image(32, 8, (0, 0, 0))
        ramp = np.linspace(0, 255, 32).astype(np.uint8)
        image[..., :3] = ramp[None, :, None]
        buffer = ingest_from_array(image)

        mapped = map_to_palette(buffer, self.BLACK_WHITE, dither=True).as_array()

        colors = np.unique(mapped[..., :3].reshape(-1, 3), axis=0).tolist()
        assert colors == [[0, 0, 0], [255, 255, 255]]
        white = mapped[..., 0] == 255
        # the middle band mixes both colors, brightness rises left to right
        middle = white[:, 12:20]
        assert middle.any() and not middle.all()
        assert white[:, :16].mean() < white[:, 16:].mean()

    def test_exact_palette_color_unchanged(self):
        buffer = ingest_from_array(solid_image(5, 4, (255, 0, 0)))

        mapped = map_to_palette(buffer, ["#FF0000", "#0000FF"], dither=True)

        np.testing.assert_array_equal(mapped.data, buffer.data)

    def test_transparent_pixels_skipped(self):
        image = solid_image(3, 2, (128, 128, 128), alpha=200)
        image[0, 1] = (7, 8, 9, 0)
        buffer = ingest_from_array(image)

        mapped = map_to_palette(buffer, self.BLACK_WHITE, dither=True)

        assert mapped.pixel(1, 0) == (7, 8, 9, 0)
        assert set(mapped.as_array()[..., 3].ravel().tolist()) == {0, 200}
