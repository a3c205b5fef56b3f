"""
Configuration management modules for backdrop.

This package contains specialized managers for different aspects of configuration:
- ProcessManager: Resolves pipeline settings of the current process
- OutputManager: Handles output paths, image formats and file naming
"""

from .process_manager import ProcessManager, DEFAULT_SETTINGS
from .output_manager import OutputManager
from .config import Config, find_default_config, create_default_config_file

__all__ = ['ProcessManager', 'OutputManager', 'Config', 'DEFAULT_SETTINGS',
           'find_default_config', 'create_default_config_file']
