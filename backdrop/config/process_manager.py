"""
Process-specific configuration management.
"""
from ..raster_ops.pixel_metrics import BACKGROUND_LEVEL
from ..raster_ops.region_growing import CHUNK_SIZE
from ..processing.strip_scheduler import DEFAULT_STRIP_HEIGHT, DEFAULT_THRESHOLD

DEFAULT_SETTINGS = {
    "threshold": DEFAULT_THRESHOLD,
    "strip_height": DEFAULT_STRIP_HEIGHT,
    "chunk_size": CHUNK_SIZE,
    "background_level": BACKGROUND_LEVEL,
    "expand_through_foreground": False,
    "strict_threshold": False,
    "timeout": 120.0,
    "executor": "thread",
    "show_progress": False,
}


class ProcessManager:
    """
    Handles process-specific configuration operations.
    """

    def __init__(self, config_instance):
        self.config = config_instance
        self.curr_process = getattr(config_instance, 'process', None)

    def set_current_process(self, process_name):
        """Set the current process name."""
        if not isinstance(process_name, str):
            raise ValueError("Process name must be a string")

        processes = self.get_processes()
        if not processes:
            raise ValueError("No processes defined in configuration")

        if process_name not in processes:
            available = list(processes.keys())
            raise ValueError(f"Process '{process_name}' not found. Available processes: {available}")

        self.curr_process = process_name
        if hasattr(self.config, 'process'):
            self.config.process = process_name

    def get_processes(self):
        """Return the processes dictionary from the config."""
        return self.config._config.get('processes', {}) or {}

    def get_current_process(self):
        """Get the current process configuration."""
        if self.curr_process is None:
            processes = self.get_processes()
            if 'default' in processes:
                self.curr_process = 'default'
                print("No process specified, using 'default' process.")
            else:
                raise ValueError("Current process is not set and no 'default' process found in configuration.")

        processes = self.get_processes()
        if self.curr_process not in processes:
            raise ValueError(f"Process '{self.curr_process}' not found in configuration.")
        return processes[self.curr_process] or {}

    def get_nested(self, *keys, default=None):
        """
        Get a nested config value by a sequence of keys.
        Example: get_nested('processes', 'my_process', 'threshold')
        """
        value = self.config._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_setting(self, key):
        """
        Resolve a pipeline setting.

        Runtime overrides win over the current process, which wins over the
        built-in defaults.
        """
        if key not in DEFAULT_SETTINGS:
            raise ValueError(f"Unknown setting '{key}'. Available settings: {list(DEFAULT_SETTINGS)}")

        override = self.config.overrides.get(key)
        if override is not None:
            return override
        try:
            process = self.get_current_process()
        except ValueError:
            return DEFAULT_SETTINGS[key]
        if key in process:
            return process[key]
        return DEFAULT_SETTINGS[key]

    def get_description(self):
        """Get the description of the current process."""
        try:
            return self.get_current_process().get("description", "")
        except ValueError:
            return ""
