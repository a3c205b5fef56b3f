import os
import shutil
import tempfile
from importlib.resources import files, as_file

import yaml

from .process_manager import ProcessManager, DEFAULT_SETTINGS
from .output_manager import OutputManager

EXECUTOR_NAMES = ("thread", "process")


def find_default_config() -> str:
    """
    Find the default configuration file using proper resource management.

    Returns:
        str: Path to the default configuration file
    """
    # First, try to find config files in the package resources
    try:
        config_files = files("backdrop.config_files")
        for config_name in ["config.yaml", "default.yaml"]:
            config_file = config_files / config_name
            if config_file.is_file():
                with as_file(config_file) as config_path:
                    # Copy to a more permanent location in user's temp directory
                    permanent_config = os.path.join(tempfile.gettempdir(), f"backdrop_{config_name}")
                    shutil.copy2(str(config_path), permanent_config)
                    return permanent_config
    except (ModuleNotFoundError, FileNotFoundError, OSError):
        pass

    # Fallback: try to find config in various common locations
    search_paths = [
        os.path.join(os.getcwd(), "config.yaml"),
        os.path.join(os.getcwd(), "config", "config.yaml"),
        os.path.expanduser("~/.backdrop/config.yaml"),
        "/etc/backdrop/config.yaml",
    ]
    for path in search_paths:
        if os.path.exists(path):
            return path

    # If no config found, create a minimal default one
    temp_config = os.path.join(tempfile.gettempdir(), "backdrop_default_config.yaml")
    create_default_config_file(temp_config)
    return temp_config


def create_default_config_file(config_path: str):
    """
    Create a minimal default configuration file.

    Args:
        config_path: Path where to create the config file
    """
    default_config = {
        "processes": {
            "default": {
                "name": "default",
                "description": "Default background removal settings",
                **DEFAULT_SETTINGS,
                "output": {
                    "path": "./output",
                    "format": "PNG",
                    "suffix": "_nobg",
                },
            }
        }
    }

    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(config_path, 'w') as f:
        yaml.dump(default_config, f, default_flow_style=False, indent=2, sort_keys=False)


class Config:
    """
    Configuration handler for background removal.
    Loads and provides access to settings from a YAML file.

    Settings are grouped in named processes; `ProcessManager` resolves the
    pipeline settings of the current process and `OutputManager` handles
    where and how results are written. Values passed to `set_override` take
    precedence over the file.
    """
    def __init__(self, yaml_file=None, process=None):
        self.yaml_file = yaml_file if yaml_file is not None else find_default_config()
        self._config = None
        self.process = process or "default"
        self.overrides = {}

        self.process_manager = ProcessManager(self)
        self.output_manager = OutputManager(self)

        self.load_config()

    def load_config(self):
        """Load the configuration from the YAML file."""
        if self._config is None:
            try:
                with open(self.yaml_file, 'r') as file:
                    self._config = yaml.safe_load(file)
            except FileNotFoundError:
                raise FileNotFoundError(f"Configuration file not found: {self.yaml_file}")
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML syntax in configuration file: {e}")

            self._validate_config()

        if self.process:
            self.set_current_process(self.process)

    def _validate_config(self):
        """Validate the structure and types of the loaded configuration."""
        if not isinstance(self._config, dict):
            raise ValueError("Configuration must be a dictionary")

        processes = self._config.get('processes')
        if not isinstance(processes, dict) or not processes:
            raise ValueError("Configuration must define at least one process under 'processes'")

        for name, process in processes.items():
            if process is None:
                continue
            if not isinstance(process, dict):
                raise ValueError(f"Process '{name}' must be a dictionary")
            for key, value in process.items():
                if key in DEFAULT_SETTINGS:
                    self._validate_setting(key, value, where=f"process '{name}'")
            if 'output' in process and not isinstance(process['output'], (dict, type(None))):
                raise ValueError(f"'output' of process '{name}' must be a dictionary")

    @staticmethod
    def _validate_setting(key, value, where="overrides"):
        """Check the type of a single pipeline setting."""
        if key in ("strip_height", "chunk_size"):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"'{key}' in {where} must be a positive integer")
        elif key in ("threshold", "background_level"):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"'{key}' in {where} must be a number")
        elif key == "timeout":
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0):
                raise ValueError(f"'timeout' in {where} must be a non-negative number or null")
        elif key == "executor":
            if value not in EXECUTOR_NAMES:
                raise ValueError(f"'executor' in {where} must be one of {list(EXECUTOR_NAMES)}")
        elif key in ("expand_through_foreground", "strict_threshold", "show_progress"):
            if not isinstance(value, bool):
                raise ValueError(f"'{key}' in {where} must be true or false")

    # Delegate process-related methods to ProcessManager
    def set_current_process(self, process_name):
        """Set the current process name."""
        return self.process_manager.set_current_process(process_name)

    def get_processes(self):
        """Return the processes dictionary from the config."""
        return self.process_manager.get_processes()

    def get_current_process(self):
        """Get the current process configuration."""
        return self.process_manager.get_current_process()

    def get_nested(self, *keys, default=None):
        """Get a nested config value by a sequence of keys."""
        return self.process_manager.get_nested(*keys, default=default)

    def get_description(self):
        """Get the description of the current process."""
        return self.process_manager.get_description()

    def get(self, key, default=None):
        """Get a top-level config value by key."""
        return self._config.get(key, default)

    def set_override(self, key, value):
        """Override a setting of the current process for this session."""
        if key not in DEFAULT_SETTINGS:
            raise ValueError(f"Unknown setting '{key}'. Available settings: {list(DEFAULT_SETTINGS)}")
        if value is not None:
            self._validate_setting(key, value)
        self.overrides[key] = value
        return self

    def get_setting(self, key):
        return self.process_manager.get_setting(key)

    def get_threshold(self):
        return self.get_setting("threshold")

    def get_strip_height(self):
        return self.get_setting("strip_height")

    def get_chunk_size(self):
        return self.get_setting("chunk_size")

    def get_background_level(self):
        return self.get_setting("background_level")

    def get_expand_through_foreground(self):
        return self.get_setting("expand_through_foreground")

    def get_strict_threshold(self):
        return self.get_setting("strict_threshold")

    def get_timeout(self):
        """Seconds to wait for each strip. 0 and null both mean no limit."""
        timeout = self.get_setting("timeout")
        return timeout or None

    def get_executor(self):
        return self.get_setting("executor")

    def get_show_progress(self):
        return self.get_setting("show_progress")

    # Delegate output-related methods to OutputManager
    def get_output_path(self):
        """Get the output directory for the current process."""
        return self.output_manager.get_output_path()

    def get_output_format(self):
        """Get the output image format for the current process."""
        return self.output_manager.get_output_format()

    def create_output_path(self, input_path):
        """Get the full output path for an input image."""
        return self.output_manager.create_output_path(input_path)

    @property
    def curr_process(self):
        """Name of the current process."""
        return self.process_manager.curr_process

    @classmethod
    def create_user_config(cls, config_path: str, template_name: str = "config.yaml"):
        """
        Create a user configuration file by copying from package resources.

        Args:
            config_path: Path where to create the user config
            template_name: Name of the template config to copy from package resources

        Returns:
            Config: A new Config instance using the created file
        """
        directory = os.path.dirname(config_path)
        try:
            template_file = files("backdrop.config_files") / template_name
            if template_file.is_file():
                with as_file(template_file) as template_path:
                    if directory:
                        os.makedirs(directory, exist_ok=True)
                    shutil.copy2(str(template_path), config_path)
                    print(f"Configuration file created at: {config_path}")
                    return cls(config_path)
        except (ModuleNotFoundError, FileNotFoundError) as e:
            print(f"Could not copy template config: {e}")

        # Fallback: create a default config
        create_default_config_file(config_path)
        print(f"Default configuration file created at: {config_path}")
        return cls(config_path)

    @staticmethod
    def list_available_templates():
        """
        List available configuration templates in the package.

        Returns:
            List[str]: List of available template names
        """
        try:
            config_files = files("backdrop.config_files")
            return sorted(
                entry.name for entry in config_files.iterdir()
                if entry.name.endswith(('.yaml', '.yml'))
            )
        except (ModuleNotFoundError, FileNotFoundError):
            return ["config.yaml"]
