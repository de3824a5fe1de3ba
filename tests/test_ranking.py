"""Tests for frequency ranking and palette extraction."""
import numpy as np
from PIL import Image

from palmap.clustering import kmeans_colors
from palmap.palette import extract_palette
from palmap.ranking import rank_clusters, ranked_hex_palette
from palmap.raster_ingest import ImageRowSource, ingest_from_array
from palmap.types import PixelBuffer, PaletteEntry

from conftest import solid_image, RED, GREEN, BLUE


class TestRankClusters:
    """Test rank_clusters."""

    def test_sorted_by_count(self):
        image = solid_image(10, 1, RED)
        image[0, :3, :3] = BLUE
        image[0, 3:9, :3] = GREEN
        buffer = ingest_from_array(image)
        centers = np.array([RED, GREEN, BLUE], dtype=float)

        entries = rank_clusters(centers, buffer)

        assert [e.index for e in entries] == [1, 2, 0]
        assert [e.count for e in entries] == [6, 3, 1]

    def test_ties_keep_index_order(self):
        image = solid_image(4, 1, RED)
        image[0, 2:, :3] = BLUE
        buffer = ingest_from_array(image)
        centers = np.array([GREEN, BLUE, RED], dtype=float)

        entries = rank_clusters(centers, buffer)

        assert [e.index for e in entries] == [1, 2, 0]
        assert [e.count for e in entries] == [2, 2, 0]

    def test_counts_sum_to_opaque_samples(self, noisy_image):
        result = kmeans_colors(noisy_image, k=6)

        entries = rank_clusters(result.centers, noisy_image)

        opaque = int(np.count_nonzero(noisy_image.data.reshape(-1, 4)[:, 3]))
        assert sum(e.count for e in entries) == opaque
        counts = [e.count for e in entries]
        assert counts == sorted(counts, reverse=True)

    def test_no_opaque_samples(self):
        buffer = ingest_from_array(solid_image(2, 2, RED, alpha=0))
        centers = np.array([RED], dtype=float)

        entries = rank_clusters(centers, buffer)

        assert [e.count for e in entries] == [0]


class TestRankedHexPalette:
    """Test hex conversion of ranked entries."""

    def test_uppercase_hex(self):
        entries = [
            PaletteEntry(color=np.array([171.2, 205.0, 239.4]), count=3, index=1),
            PaletteEntry(color=np.array([0.0, 0.0, 0.0]), count=1, index=0),
        ]

        assert ranked_hex_palette(entries) == ["#ABCDEF", "#000000"]

    def test_rounding_duplicates_dropped(self):
        entries = [
            PaletteEntry(color=np.array([10.2, 10.0, 10.0]), count=3, index=0),
            PaletteEntry(color=np.array([9.8, 10.0, 10.0]), count=2, index=1),
        ]

        assert ranked_hex_palette(entries) == ["#0A0A0A"]


class TestExtractPalette:
    """Test the sample -> cluster -> rank chain."""

    def test_most_frequent_first(self):
        image = solid_image(20, 20, BLUE)
        image[:5] = (255, 0, 0, 255)
        image[5:8] = (0, 255, 0, 255)
        buffer = ingest_from_array(image)

        palette = extract_palette(buffer, k=3)

        assert palette == ["#0000FF", "#FF0000", "#00FF00"]

    def test_length_at_most_k(self, noisy_image):
        palette = extract_palette(noisy_image, k=4)

        assert 0 < len(palette) <= 4
        assert all(p.startswith("#") and p == p.upper() and len(p) == 7 for p in palette)

    def test_empty_image(self):
        assert extract_palette(PixelBuffer.empty(0, 0)) == []

    def test_row_source(self):
        image = solid_image(30, 30, RED)
        image[20:] = (0, 0, 255, 255)
        source = ImageRowSource(Image.fromarray(image))

        assert extract_palette(source, k=2, target_pixels=100) == ["#FF0000", "#0000FF"]
