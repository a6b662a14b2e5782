"""
Storage Layer.

This package handles all data persistence: the configuration file and the
generated dataset.
"""

from .config_manager import ConfigManager
from .output import prepare_output_dir, write_records

__all__ = ["ConfigManager", "prepare_output_dir", "write_records"]
