"""
Configuration file loading utilities.

This module reads config.toml and hands the `[monitor]` table to the
validators. Unknown `[monitor.*]` tables are reported, not rejected, so a
newer file still loads.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

KNOWN_SECTIONS = ("general", "collection", "tracer", "storage")


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Read and parse a TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"{description} not found: {file_path}") from None
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description} {file_path}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """
    Load config.toml and return its `[monitor]` table.

    Returns:
        The `[monitor]` table, empty when the file has none
    """
    data = load_toml_file(config_path, "main configuration file")
    monitor_data = data.get("monitor", {})
    for section in monitor_data:
        if section not in KNOWN_SECTIONS:
            logger.warning(f"Ignoring unknown section [monitor.{section}] in {config_path}")
    return monitor_data
