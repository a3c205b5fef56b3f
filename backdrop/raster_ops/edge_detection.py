import numpy as np
import dask.array as da
from scipy.ndimage import correlate

from .pixel_metrics import luminance_map, SOBEL_X, SOBEL_Y

"""Sobel Edge Mask"""
def detect_edges(pixels, threshold):
    """
    Build the edge mask of an RGBA buffer.

    Luminance is computed for every pixel before any gradient is sampled.
    Only interior pixels can be edges; the outer ring of the mask is always False.

    Args:
        pixels (np.ndarray): RGBA buffer of shape (H, W, 4).
        threshold (float): Gradient magnitude an edge must strictly exceed.

    Returns:
        np.ndarray: Boolean mask of shape (H, W).
    """
    return edge_mask_from_luminance(luminance_map(pixels), threshold)

def edge_mask_from_luminance(lum, threshold):
    """Edge mask of a luminance map, False on the border."""
    mask = np.zeros(lum.shape, dtype=bool)
    height, width = lum.shape
    if height < 3 or width < 3:
        return mask
    magnitude = sobel_magnitude(lum)
    mask[1:-1, 1:-1] = magnitude[1:-1, 1:-1] > threshold
    return mask

def sobel_magnitude(lum):
    """
    Sobel gradient magnitude over a whole luminance map.

    Values on the border use reflected samples and are not meaningful;
    callers only read the interior.
    """
    lum = np.asarray(lum, dtype=np.int32)
    gx = correlate(lum, SOBEL_X, mode='reflect')
    gy = correlate(lum, SOBEL_Y, mode='reflect')
    return np.hypot(gx, gy)

"""Chunked Edge Mask"""
def dask_edge_mask(pixels, threshold, chunk_size=(1024, 1024)):
    """
    Whole-image edge mask computed block by block with Dask.

    Blocks share a one pixel overlap so seams are evaluated with their true
    neighbours, while no padding is added at the image border. The result is
    identical to `detect_edges` on the same image.
    """
    if isinstance(chunk_size, int):
        chunk_size = (chunk_size, chunk_size)
    chunk_size = tuple(max(int(c), 3) for c in chunk_size)

    lum = luminance_map(pixels)
    dask_arr = da.from_array(lum, chunks=chunk_size)
    mask = dask_arr.map_overlap(
        _edge_mask_block,
        threshold=threshold,
        depth=1,
        boundary='none',
        dtype=bool
    )
    return mask.compute()

def _edge_mask_block(block, threshold):
    """Apply the edge mask kernel to a chunk."""
    return edge_mask_from_luminance(block, threshold)
