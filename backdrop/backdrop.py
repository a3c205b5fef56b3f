from .processing import ProcessingPipeline
from .config import Config
from . import raster_ops as ro


class Backdrop:
    """Main class for removing near-white backgrounds from images."""
    def __init__(self, config, pixels=None, source_path=None):
        self.config = config
        self.pixels = pixels
        self.source_path = source_path
        self.pipeline = ProcessingPipeline(config)

    @classmethod
    def from_config(cls, config_yaml=None, process=None):
        """
        Create an instance of Backdrop from a configuration file.

        Args:
            config_yaml (str): Path to the configuration YAML file.
            process (str): The name of the process to use. Leave as None for 'default'.

        Returns:
            Backdrop: An instance of the Backdrop class.
        """
        return cls(Config(config_yaml, process=process))

    @classmethod
    def from_array(cls, array, width=None, height=None, threshold=None, strip_height=None,
                   config_yaml=None, process=None):
        """
        Create an instance of Backdrop from pixel data.

        Args:
            array: RGBA array of shape (H, W, 4), or a flat RGBA buffer.
            width: Image width, required for flat buffers.
            height: Image height, required for flat buffers.
            threshold: Edge threshold, overrides the configuration.
            strip_height: Rows per strip, overrides the configuration.

        Returns:
            Backdrop: An instance of the Backdrop class.
        """
        config = Config(config_yaml, process=process)
        pixels = ro.as_pixel_array(array, width, height)
        return cls(config, pixels=pixels).configure(threshold=threshold, strip_height=strip_height)

    @classmethod
    def from_file(cls, path, config_yaml=None, process=None):
        """
        Create an instance of Backdrop from an image file.

        Args:
            path (str): Any image Pillow can read; it is converted to RGBA.

        Returns:
            Backdrop: An instance of the Backdrop class.
        """
        config = Config(config_yaml, process=process)
        return cls(config, pixels=ro.open_image(path), source_path=path)

    def configure(self, threshold=None, strip_height=None, chunk_size=None, timeout=None,
                  executor=None, show_progress=None):
        """
        Override settings of the current process. None leaves a setting alone.

        Returns:
            self: Returns self to enable method chaining.
        """
        settings = {
            "threshold": threshold,
            "strip_height": strip_height,
            "chunk_size": chunk_size,
            "timeout": timeout,
            "executor": executor,
            "show_progress": show_progress,
        }
        for key, value in settings.items():
            if value is not None:
                self.config.set_override(key, value)
        return self

    def remove_background(self, progress_callback=None, cancel_token=None):
        """
        Clear the alpha channel of the background.

        Returns:
            np.ndarray: The processed (H, W, 4) pixels.
        """
        if self.pixels is None:
            raise ValueError("No pixels loaded. Use Backdrop.from_array or Backdrop.from_file.")
        return self.pipeline.process_array(
            self.pixels,
            progress_callback=progress_callback,
            cancel_token=cancel_token,
        )

    def edge_mask(self, chunk_size=(1024, 1024)):
        """Edge mask of the whole image at the configured threshold."""
        if self.pixels is None:
            raise ValueError("No pixels loaded. Use Backdrop.from_array or Backdrop.from_file.")
        return ro.dask_edge_mask(self.pixels, self.config.get_threshold(), chunk_size=chunk_size)

    def save(self, path=None):
        """
        Write the current pixels to an image file.

        Args:
            path (str): Destination. Defaults to the configured output
                directory and a name derived from the source file.

        Returns:
            str: The written path.
        """
        if self.pixels is None:
            raise ValueError("No pixels to save.")
        if path is None:
            if self.source_path is None:
                raise ValueError("An output path is required for images that were not loaded from a file.")
            path = self.config.create_output_path(self.source_path)
        return ro.save_image(self.pixels, path, self.config.get_output_format())
