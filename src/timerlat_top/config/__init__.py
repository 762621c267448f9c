"""
Configuration management for the timerlat_top package.

This module provides a clean interface for loading, validating, and accessing
configuration data from TOML files with singleton pattern management.
"""

from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    reset_config_path,
    set_config_path,
)

from .loader import load_main_config, load_toml_file
from .validators import (
    MAX_PERIOD_US,
    validate_monitor_config,
    validate_storage_config,
    validate_tracer_config,
)

__all__ = [
    "get_config",
    "set_config_path",
    "reset_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    "load_toml_file",
    "load_main_config",
    "MAX_PERIOD_US",
    "validate_monitor_config",
    "validate_storage_config",
    "validate_tracer_config",
]
