import numpy as np
import pytest

from backdrop.errors import InvalidDimensions
from backdrop.raster_ops.edge_detection import detect_edges
from backdrop.raster_ops.region_growing import RegionGrower, remove_background

from conftest import make_ring


def alpha(image):
    return image[..., 3]


def test_uniform_image_stays_opaque(white_image):
    edges = detect_edges(white_image, 10)
    grower = RegionGrower(white_image, edges)
    grower.run()
    assert grower.visited_count == 0
    assert (alpha(white_image) == 255).all()


def test_ring_clears_inside_and_keeps_border(ring_image):
    remove_background(ring_image, detect_edges(ring_image, 10))
    a = alpha(ring_image)

    assert (a[2:8, 2:8] == 0).all()
    # Ring
    assert (a[1, 1:9] == 255).all() and (a[8, 1:9] == 255).all()
    assert (a[1:9, 1] == 255).all() and (a[1:9, 8] == 255).all()
    # Outer border
    assert (a[0] == 255).all() and (a[9] == 255).all()
    assert (a[:, 0] == 255).all() and (a[:, 9] == 255).all()


def test_rgb_is_untouched(ring_image):
    before = ring_image[..., :3].copy()
    remove_background(ring_image, detect_edges(ring_image, 10))
    assert np.array_equal(ring_image[..., :3], before)


def test_disconnected_white_region_keeps_opacity():
    image = np.full((12, 24, 4), 255, dtype=np.uint8)
    image[:, 12, :3] = 230   # light grey wall, too faint to be an edge at threshold 150
    image[4:8, 4:8, :3] = 0  # black square on the left side

    edges = detect_edges(image, 150)
    assert not edges[:, 10:].any()

    remove_background(image, edges)
    a = alpha(image)
    assert (a[:, 13:] == 255).all()
    assert (a[:, 12] == 255).all()
    assert (a[0, :12] == 0).all()
    assert (a[4:8, 4:8] == 255).all()


def test_cleared_iff_visited_and_near_white(two_squares_image):
    image = two_squares_image
    original = image.copy()
    grower = RegionGrower(image, detect_edges(image, 30))
    grower.run()

    visited = grower.visited.reshape(image.shape[:2])
    near_white = (original[..., :3] > 240).all(axis=2)
    assert np.array_equal(alpha(image) == 0, visited & near_white)


def test_horizontal_neighbours_do_not_wrap():
    image = np.zeros((6, 6, 4), dtype=np.uint8)
    image[..., 3] = 255
    white = [(1, 3), (1, 4), (1, 5), (2, 0), (4, 1), (4, 0), (3, 5)]
    for y, x in white:
        image[y, x, :3] = 255

    edges = np.zeros((6, 6), dtype=bool)
    edges[1, 3] = True
    edges[4, 1] = True
    remove_background(image, edges)
    a = alpha(image)

    assert (a[1, 3:6] == 0).all()
    assert a[4, 1] == 0 and a[4, 0] == 0
    # (2, 0) directly follows (1, 5) and (3, 5) directly precedes (4, 0) in linear order
    assert a[2, 0] == 255
    assert a[3, 5] == 255


def test_each_pixel_processed_once(noise_image):
    grower = RegionGrower(noise_image, detect_edges(noise_image, 50), expand_through_foreground=True)
    grower.run()
    height, width = noise_image.shape[:2]
    assert grower.processed == grower.visited_count
    assert grower.visited_count <= width * height


def test_unconditional_expansion_reaches_border(ring_image):
    remove_background(ring_image, detect_edges(ring_image, 10), expand_through_foreground=True)
    a = alpha(ring_image)
    white = (ring_image[..., :3] == 255).all(axis=2)
    assert (a[white] == 0).all()
    assert (a[~white] == 255).all()


def test_grow_yields_between_chunks():
    image = make_ring(40)
    grower = RegionGrower(image, detect_edges(image, 10), chunk_size=10)
    remaining = list(grower.grow())

    assert remaining
    assert all(r > 0 for r in remaining)
    assert grower.chunks == len(remaining) + 1

    reference = make_ring(40)
    remove_background(reference, detect_edges(reference, 10), chunk_size=100000)
    assert np.array_equal(image, reference)


def test_seed_order_is_row_major(ring_image):
    edges = detect_edges(ring_image, 10)
    grower = RegionGrower(ring_image, edges)
    count = grower.seed()
    assert count == int(edges.sum())
    assert list(grower.queue) == sorted(grower.queue)


def test_edge_mask_shape_must_match(ring_image):
    with pytest.raises(InvalidDimensions):
        RegionGrower(ring_image, np.zeros((9, 10), dtype=bool))


def test_chunk_size_must_be_positive(ring_image):
    with pytest.raises(ValueError):
        RegionGrower(ring_image, detect_edges(ring_image, 10), chunk_size=0)


def test_non_contiguous_view_is_rejected(ring_image):
    view = ring_image[:, ::2]
    with pytest.raises(ValueError):
        RegionGrower(view, np.zeros(view.shape[:2], dtype=bool))


def test_background_test_is_shared_with_pixel_metrics(monkeypatch, ring_image):
    from backdrop.raster_ops import region_growing

    monkeypatch.setattr(region_growing, "is_near_white", lambda rgb, level: False)
    result = remove_background(ring_image, detect_edges(ring_image, 10))
    assert (alpha(result) == 255).all()
