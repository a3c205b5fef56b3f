import numpy as np
import pytest

from backdrop.raster_ops.edge_detection import dask_edge_mask, detect_edges


def border(mask):
    return np.concatenate([mask[0], mask[-1], mask[:, 0], mask[:, -1]])


@pytest.mark.parametrize("threshold", [-1, 0, 30, 255])
def test_border_is_never_an_edge(noise_image, threshold):
    mask = detect_edges(noise_image, threshold)
    assert mask.shape == noise_image.shape[:2]
    assert not border(mask).any()


def test_negative_threshold_marks_whole_interior(noise_image):
    mask = detect_edges(noise_image, -1)
    assert mask[1:-1, 1:-1].all()


def test_uniform_image_has_no_edges(white_image):
    assert not detect_edges(white_image, 10).any()


def test_vertical_step_edges():
    image = np.full((6, 6, 4), 255, dtype=np.uint8)
    image[:, :3, :3] = 0
    mask = detect_edges(image, 30)

    expected = np.zeros((6, 6), dtype=bool)
    expected[1:-1, 2:4] = True
    assert np.array_equal(mask, expected)


@pytest.mark.parametrize("shape", [(1, 1), (2, 9), (9, 2)])
def test_images_without_interior(shape):
    rng = np.random.default_rng(7)
    image = rng.integers(0, 256, size=shape + (4,), dtype=np.uint8)
    mask = detect_edges(image, 0)
    assert mask.shape == shape
    assert not mask.any()


def test_threshold_is_strict():
    image = np.full((3, 3, 4), 255, dtype=np.uint8)
    image[:, 2, :3] = 0
    # Gradient at the centre is exactly 4 * lum(white)
    lum_white = int(255 * 0.299 + 255 * 0.587 + 255 * 0.114)
    assert not detect_edges(image, 4 * lum_white)[1, 1]
    assert detect_edges(image, 4 * lum_white - 1)[1, 1]


@pytest.mark.parametrize("chunk_size", [8, (5, 11), 1024])
def test_dask_edge_mask_matches_detect_edges(noise_image, chunk_size):
    expected = detect_edges(noise_image, 100)
    result = dask_edge_mask(noise_image, 100, chunk_size=chunk_size)
    assert result.dtype == bool
    assert np.array_equal(result, expected)


def test_dask_edge_mask_on_structured_image(ring_image):
    assert np.array_equal(dask_edge_mask(ring_image, 10, chunk_size=4), detect_edges(ring_image, 10))
