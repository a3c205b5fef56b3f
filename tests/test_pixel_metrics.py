import numpy as np
import pytest

from backdrop.errors import InvalidDimensions
from backdrop.raster_ops.pixel_metrics import (
    gradient_magnitude,
    is_near_white,
    luminance,
    luminance_map,
)
from backdrop.raster_ops.edge_detection import sobel_magnitude


def test_luminance_of_primaries():
    pixels = np.zeros((1, 4, 4), dtype=np.uint8)
    pixels[0, 0] = [255, 0, 0, 255]
    pixels[0, 1] = [0, 255, 0, 255]
    pixels[0, 2] = [0, 0, 255, 255]
    assert luminance(pixels, 0, 0) == 76
    assert luminance(pixels, 1, 0) == 149
    assert luminance(pixels, 2, 0) == 29
    assert luminance(pixels, 3, 0) == 0


def test_luminance_range_and_determinism(noise_image):
    first = luminance_map(noise_image)
    second = luminance_map(noise_image)
    assert first.dtype == np.uint8
    assert first.shape == noise_image.shape[:2]
    assert np.array_equal(first, second)
    assert first.min() >= 0 and first.max() <= 255


def test_luminance_map_matches_single_pixel(noise_image):
    lum = luminance_map(noise_image)
    height, width = lum.shape
    for y in range(height):
        for x in range(width):
            assert lum[y, x] == luminance(noise_image, x, y)


def test_gradient_of_vertical_step():
    lum = np.zeros((3, 3), dtype=np.uint8)
    lum[:, 2] = 255
    assert gradient_magnitude(lum, 1, 1) == pytest.approx(1020.0)


def test_gradient_of_flat_area_is_zero():
    lum = np.full((5, 5), 200, dtype=np.uint8)
    assert gradient_magnitude(lum, 2, 2) == 0.0


@pytest.mark.parametrize("x, y", [(0, 1), (1, 0), (4, 2), (2, 4)])
def test_gradient_rejects_border_coordinates(x, y):
    lum = np.zeros((5, 5), dtype=np.uint8)
    with pytest.raises(InvalidDimensions):
        gradient_magnitude(lum, x, y)


def test_sobel_magnitude_matches_gradient(noise_image):
    lum = luminance_map(noise_image)
    magnitude = sobel_magnitude(lum)
    height, width = lum.shape
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            assert magnitude[y, x] == pytest.approx(gradient_magnitude(lum, x, y))


def test_near_white_is_strict():
    assert is_near_white((241, 241, 241))
    assert not is_near_white((240, 255, 255))
    assert not is_near_white((255, 255, 240))
    assert is_near_white((231, 231, 231), level=230)
