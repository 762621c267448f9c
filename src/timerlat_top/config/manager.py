"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import ErrorSeverity, ValidationError, handle_config_error
from .loader import load_main_config
from .validators import validate_monitor_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# Default path to the configuration file, relative to the repository root.
# Overridden by set_config_path (e.g. from the --config option or in tests).
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Args:
        config_path: Path to the config.toml file

    Note:
        The cached configuration is dropped so the next get_config()
        call loads from the new path.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def reset_config_path() -> None:
    """Point the loader back at the repository default file and drop the cache."""
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH
    _CONFIG = None


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> AppConfig:
    """
    Load and validate the application configuration.

    A missing file at the default location falls back to built-in defaults;
    a missing file anywhere else is an error.

    Raises:
        FileNotFoundError: If an explicitly chosen configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if config_path == _DEFAULT_CONFIG_FILE_PATH and not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using built-in defaults")
        return AppConfig(monitor=validate_monitor_config({}), source=None)

    try:
        monitor_config = validate_monitor_config(load_main_config(config_path))
    except (FileNotFoundError, ValidationError, ValueError) as e:
        missing = isinstance(e, FileNotFoundError)
        handle_config_error(
            error=e,
            context="loading configuration file" if missing else "processing configuration",
            severity=ErrorSeverity.CRITICAL if missing else ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise

    logger.info(f"Successfully loaded configuration from {config_path}")
    return AppConfig(monitor=monitor_config, source=config_path)


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton AppConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "source": str(_CONFIG.source) if _CONFIG and _CONFIG.source else None,
    }
