import os

import numpy as np
from PIL import Image

from ..errors import InvalidDimensions


def as_pixel_array(data, width=None, height=None):
    """
    View pixel data as an RGBA array of shape (H, W, 4) without copying.

    Args:
        data: A (H, W, 4) uint8 array, or a flat buffer (bytearray, memoryview,
            1-D array) of length W * H * 4 together with `width` and `height`.
        width (int): Image width, required for flat buffers.
        height (int): Image height, required for flat buffers.

    Returns:
        np.ndarray: Writable view of the pixels when the input is writable.
            Read-only inputs such as `bytes` are copied.

    Raises:
        InvalidDimensions: If the size is zero or does not match width/height.
    """
    if isinstance(data, np.ndarray) and data.ndim == 3:
        if data.shape[2] != 4:
            raise InvalidDimensions(f"Expected 4 channels (RGBA), got {data.shape[2]}")
        if data.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {data.dtype}")
        h, w = data.shape[:2]
        if width is not None and width != w or height is not None and height != h:
            raise InvalidDimensions(f"Array is {w}x{h} but {width}x{height} was given")
        validate_dimensions(w, h)
        if not data.flags.writeable:
            return data.copy()
        return data

    if width is None or height is None:
        raise InvalidDimensions("'width' and 'height' are required for flat pixel buffers")
    validate_dimensions(width, height)

    if isinstance(data, np.ndarray):
        flat = data.reshape(-1)
        if flat.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {flat.dtype}")
    else:
        flat = np.frombuffer(data, dtype=np.uint8)

    expected = width * height * 4
    if flat.size != expected:
        raise InvalidDimensions(
            f"Buffer holds {flat.size} bytes, expected {expected} for a {width}x{height} RGBA image"
        )
    if not flat.flags.writeable:
        flat = flat.copy()
    return flat.reshape(height, width, 4)

def validate_dimensions(width, height):
    """Raise InvalidDimensions unless width and height are positive integers."""
    if not isinstance(width, (int, np.integer)) or not isinstance(height, (int, np.integer)):
        raise InvalidDimensions(f"Width and height must be integers, got {width!r} and {height!r}")
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"Width and height must be positive, got {width}x{height}")

def open_image(path):
    """Read an image file into a (H, W, 4) uint8 RGBA array."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Image file not found: {path}")
    with Image.open(path) as img:
        return np.array(img.convert("RGBA"))

def save_image(pixels, path, image_format=None):
    """Write a (H, W, 4) RGBA array to an image file."""
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    img = Image.fromarray(np.ascontiguousarray(pixels))
    img.save(path, format=image_format)
    return path

def save_mask(mask, path):
    """Write a boolean mask as an 8-bit greyscale image (edges white)."""
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    Image.fromarray(np.asarray(mask, dtype=np.uint8) * 255).save(path)
    return path
