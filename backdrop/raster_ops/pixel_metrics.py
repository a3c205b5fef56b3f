import numpy as np

from ..errors import InvalidDimensions

LUMA_WEIGHTS = (0.299, 0.587, 0.114)
BACKGROUND_LEVEL = 240

# Sobel kernels, indexed [dy + 1, dx + 1]
SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.int32)
SOBEL_Y = np.array([[-1, -2, -1],
                    [0, 0, 0],
                    [1, 2, 1]], dtype=np.int32)


def luminance(pixels, x, y):
    """
    Grayscale value of a single pixel.

    Args:
        pixels (np.ndarray): RGBA buffer of shape (H, W, 4).
        x (int): Column.
        y (int): Row.

    Returns:
        int: Weighted luminance truncated to the 0-255 range.
    """
    r, g, b = (int(c) for c in pixels[y, x, :3])
    value = r * LUMA_WEIGHTS[0] + g * LUMA_WEIGHTS[1] + b * LUMA_WEIGHTS[2]
    return int(value)


def luminance_map(pixels):
    """Luminance of every pixel as a (H, W) uint8 array."""
    rgb = pixels[..., :3].astype(np.float64)
    value = rgb[..., 0] * LUMA_WEIGHTS[0] + rgb[..., 1] * LUMA_WEIGHTS[1] + rgb[..., 2] * LUMA_WEIGHTS[2]
    return value.astype(np.uint8)


def gradient_magnitude(lum, x, y):
    """
    Sobel gradient magnitude at an interior pixel of a luminance map.

    Args:
        lum (np.ndarray): Luminance map of shape (H, W).
        x (int): Column, must satisfy 1 <= x <= W - 2.
        y (int): Row, must satisfy 1 <= y <= H - 2.

    Returns:
        float: sqrt(Gx**2 + Gy**2)
    """
    height, width = lum.shape
    if not (1 <= x <= width - 2 and 1 <= y <= height - 2):
        raise InvalidDimensions(
            f"Gradient is only defined for interior pixels, got ({x}, {y}) in a {width}x{height} map"
        )
    window = lum[y - 1:y + 2, x - 1:x + 2].astype(np.int32)
    gx = int(np.sum(window * SOBEL_X))
    gy = int(np.sum(window * SOBEL_Y))
    return float(np.hypot(gx, gy))


def is_near_white(rgb, level=BACKGROUND_LEVEL):
    """Background predicate: every colour channel strictly above `level`."""
    return rgb[0] > level and rgb[1] > level and rgb[2] > level
