"""
Core processing pipeline orchestration.
"""
import time

from .. import raster_ops as ro
from .execution_channel import ExecutionChannel
from .strip_scheduler import StripScheduler
from .processing_utils import ProcessingMetrics


class ProcessingPipeline:
    """
    Main orchestrator for background removal.

    A fresh ExecutionChannel is opened for every run and closed once all of
    its requests have settled.

    Attributes:
    -----------
        config: Configuration object containing processing settings
    """
    def __init__(self, config):
        self.config = config
        self.metrics = ProcessingMetrics()

    def build_scheduler(self, channel):
        """Create a StripScheduler from the current configuration."""
        return StripScheduler(
            channel,
            strip_height=self.config.get_strip_height(),
            chunk_size=self.config.get_chunk_size(),
            background_level=self.config.get_background_level(),
            expand_through_foreground=self.config.get_expand_through_foreground(),
            timeout=self.config.get_timeout(),
            strict_threshold=self.config.get_strict_threshold(),
            show_progress=self.config.get_show_progress(),
            metrics=self.metrics,
        )

    def process_array(self, pixels, width=None, height=None, progress_callback=None, cancel_token=None):
        """
        Remove the background of an in-memory RGBA buffer.

        Args:
            pixels: RGBA array (H, W, 4) or flat buffer with width/height.
            progress_callback: Called with the integer progress after each strip.
            cancel_token: Optional CancellationToken.

        Returns:
            np.ndarray: The processed pixels, alpha updated in place.
        """
        image = ro.as_pixel_array(pixels, width, height)
        threshold = self.config.get_threshold()

        self.metrics.start_timer("background removal")
        with ExecutionChannel(self.config.get_executor()) as channel:
            scheduler = self.build_scheduler(channel)
            scheduler.run(image, threshold, progress_callback=progress_callback, cancel_token=cancel_token)
        self.metrics.end_timer("background removal")

        print(f"Background removal execution time: {self.metrics.get_duration('background removal'):.2f} seconds")
        return image

    def process_file(self, input_path, output_path=None, progress_callback=None):
        """
        Remove the background of an image file and write the result.

        Returns:
            str: Path of the written image.
        """
        start_time = time.time()
        pixels = ro.open_image(input_path)
        end_time = time.time()
        print(f"Image load execution time: {end_time - start_time:.2f} seconds")

        self.process_array(pixels, progress_callback=progress_callback)

        if output_path is None:
            output_path = self.config.create_output_path(input_path)
        ro.save_image(pixels, output_path, self.config.get_output_format())
        print(f"Saved: {output_path}")
        return output_path
