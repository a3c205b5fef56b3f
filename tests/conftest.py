import numpy as np
import pytest


def make_white(height, width):
    return np.full((height, width, 4), 255, dtype=np.uint8)


def make_ring(size=10):
    """White square with a black ring on rows/columns 1 and size - 2."""
    image = make_white(size, size)
    image[1, 1:size - 1, :3] = 0
    image[size - 2, 1:size - 1, :3] = 0
    image[1:size - 1, 1, :3] = 0
    image[1:size - 1, size - 2, :3] = 0
    return image


def make_two_squares():
    """30x20 white image with one black square in each half."""
    image = make_white(20, 30)
    image[3:7, 5:9, :3] = 0
    image[13:17, 18:22, :3] = 0
    return image


@pytest.fixture
def white_image():
    return make_white(10, 10)


@pytest.fixture
def ring_image():
    return make_ring(10)


@pytest.fixture
def two_squares_image():
    return make_two_squares()


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8)
