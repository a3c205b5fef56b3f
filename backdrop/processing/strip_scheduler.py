"""
Strip-by-strip driver of the background removal worker.
"""
import math
import numbers

from tqdm import tqdm

from ..errors import ThresholdOutOfRange
from ..raster_ops.pixel_metrics import BACKGROUND_LEVEL
from ..raster_ops.raster_utils import as_pixel_array
from ..raster_ops.region_growing import CHUNK_SIZE
from .execution_channel import StripRequest
from .processing_utils import ProcessingMetrics

DEFAULT_THRESHOLD = 30
DEFAULT_STRIP_HEIGHT = 500
MAX_RECOMMENDED_THRESHOLD = 255


def plan_strips(height, strip_height=DEFAULT_STRIP_HEIGHT):
    """
    Split `height` rows into consecutive (start_row, row_count) strips.

    Every strip has `strip_height` rows except possibly the last one.
    """
    if not isinstance(strip_height, int) or strip_height < 1:
        raise ValueError("'strip_height' must be a positive integer")
    rows = min(strip_height, height)
    plan = []
    start = 0
    while start < height:
        count = min(rows, height - start)
        plan.append((start, count))
        start += count
    return plan

def check_threshold(threshold, strict=False):
    """
    Validate an edge threshold.

    Non-numeric and negative values are rejected. Values above 255 are
    only rejected when `strict` is set, otherwise a warning is printed.
    """
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real) or math.isnan(threshold):
        raise ThresholdOutOfRange(f"Threshold must be a number, got {threshold!r}")
    if threshold < 0:
        raise ThresholdOutOfRange(f"Threshold must not be negative, got {threshold}")
    if threshold > MAX_RECOMMENDED_THRESHOLD:
        message = f"Threshold {threshold} is outside the recommended range 0-{MAX_RECOMMENDED_THRESHOLD}"
        if strict:
            raise ThresholdOutOfRange(message)
        print(f"Warning: {message}, few edges will be detected.")
    return threshold

def strip_progress(processed_rows, height):
    """Integer percentage of rows done, rounded up so any progress is above 0."""
    return -(-processed_rows * 100 // height)


class StripScheduler:
    """
    Sends an image through an ExecutionChannel one horizontal strip at a time.

    Strips are independent: a region that crosses a seam is grown separately
    on each side of it. Only one strip is in flight at a time, and strips are
    handled in row order.

    Attributes:
    -----------
        channel (ExecutionChannel): Open channel to the worker.
        strip_height (int): Rows per strip.
        timeout (float): Seconds to wait for each strip, None waits forever.
    """
    def __init__(self, channel, strip_height=DEFAULT_STRIP_HEIGHT, chunk_size=CHUNK_SIZE,
                 background_level=BACKGROUND_LEVEL, expand_through_foreground=False,
                 timeout=None, strict_threshold=False, show_progress=False, metrics=None):
        self.channel = channel
        self.strip_height = strip_height
        self.chunk_size = chunk_size
        self.background_level = background_level
        self.expand_through_foreground = expand_through_foreground
        self.timeout = timeout
        self.strict_threshold = strict_threshold
        self.show_progress = show_progress
        self.metrics = metrics if metrics is not None else ProcessingMetrics()

    def stream(self, pixels, threshold=DEFAULT_THRESHOLD, width=None, height=None, cancel_token=None):
        """
        Process the image and yield the progress percentage after every strip.

        The buffer is validated before the first request and its alpha channel
        is updated in place as each response arrives.

        Yields:
            int: Progress from 1 to 100, non-decreasing.
        """
        image = as_pixel_array(pixels, width, height)
        check_threshold(threshold, self.strict_threshold)
        total_rows = image.shape[0]
        plan = plan_strips(total_rows, self.strip_height)

        processed_rows = 0
        with tqdm(total=100, desc="Removing background", unit="%", disable=not self.show_progress) as bar:
            for index, (start_row, rows) in enumerate(plan):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled(f"Run cancelled before strip {index}")

                request = StripRequest(
                    pixels=image[start_row:start_row + rows].copy(),
                    threshold=threshold,
                    index=index,
                    start_row=start_row,
                    chunk_size=self.chunk_size,
                    background_level=self.background_level,
                    expand_through_foreground=self.expand_through_foreground,
                )
                timer = f"strip {index}"
                self.metrics.start_timer(timer)
                response = self.channel.request(request, timeout=self.timeout, cancel_token=cancel_token)
                self.metrics.end_timer(timer)
                self.metrics.record_strip(response, rows)

                image[start_row:start_row + rows, :, 3] = response.pixels[:, :, 3]

                processed_rows += rows
                progress = strip_progress(processed_rows, total_rows)
                bar.update(progress - bar.n)
                yield progress

    def run(self, pixels, threshold=DEFAULT_THRESHOLD, width=None, height=None,
            progress_callback=None, cancel_token=None):
        """
        Process the whole image.

        Args:
            pixels: RGBA array (H, W, 4) or flat buffer with width/height.
            threshold (float): Edge threshold.
            progress_callback (callable): Called with each progress percentage.
            cancel_token (CancellationToken): Checked before every strip and by the worker.

        Returns:
            np.ndarray: The (H, W, 4) view of the processed pixels.
        """
        image = as_pixel_array(pixels, width, height)
        for progress in self.stream(image, threshold, cancel_token=cancel_token):
            if progress_callback is not None:
                progress_callback(progress)
        return image
