"""
Output path and format configuration management.
"""
import os


class OutputManager:
    """
    Handles output paths, image formats and file naming.
    """

    def __init__(self, config_instance):
        self.config = config_instance

    def _get_output_section(self):
        try:
            from .process_manager import ProcessManager
            process = ProcessManager(self.config).get_current_process()
            return process.get('output', {}) or {}
        except ValueError:
            return {}

    def get_output_path(self):
        """Get the output directory for the current process."""
        return self._get_output_section().get('path', '') or os.getcwd()

    def get_output_format(self):
        """Get the image format for the current process."""
        return self._get_output_section().get('format', 'PNG')

    def get_output_suffix(self):
        """Get the suffix appended to output file names."""
        return self._get_output_section().get('suffix', '_nobg')

    def create_output_filename(self, input_path):
        """Build the output file name for an input image."""
        extension_map = {
            'PNG': 'png',
            'WEBP': 'webp',
            'TIFF': 'tif',
        }
        image_format = self.get_output_format()
        if image_format.upper() not in extension_map:
            raise ValueError(
                f"Format '{image_format}' cannot store transparency. Use one of: {list(extension_map)}"
            )
        stem = os.path.splitext(os.path.basename(input_path))[0]
        return f"{stem}{self.get_output_suffix()}.{extension_map[image_format.upper()]}"

    def create_output_path(self, input_path):
        """Full output path for an input image."""
        return os.path.join(self.get_output_path(), self.create_output_filename(input_path))
