"""Pytest configuration and fixtures."""
import numpy as np
import pytest

from palmap.raster_ingest import ingest_from_array

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


def solid_image(width, height, color, alpha=255):
    """(H, W, 4) uint8 array filled with one color."""
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[..., :3] = color
    image[..., 3] = alpha
    return image


@pytest.fixture
def red_2x2():
    """2x2 solid red buffer."""
    return ingest_from_array(solid_image(2, 2, RED))


@pytest.fixture
def red_over_blue():
    """4x4 buffer: top two rows red, bottom two rows blue."""
    image = solid_image(4, 4, RED)
    image[2:, :, :3] = BLUE
    return ingest_from_array(image)


@pytest.fixture
def quadrants():
    """40x40 buffer with red, green, blue and white quadrants."""
    image = solid_image(40, 40, RED)
    image[:20, 20:, :3] = GREEN
    image[20:, :20, :3] = BLUE
    image[20:, 20:, :3] = (255, 255, 255)
    return ingest_from_array(image)


@pytest.fixture
def noisy_image():
    """Random 30x20 RGBA buffer with some fully transparent pixels."""
    rng = np.random.default_rng(7)
    image = rng.integers(0, 256, size=(20, 30, 4), dtype=np.uint8)
    image[..., 3] = 255
    image[rng.random((20, 30)) < 0.2, 3] = 0
    return ingest_from_array(image)
