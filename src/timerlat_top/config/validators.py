"""
Configuration validation utilities.

This module turns the raw `[monitor]` table of config.toml into validated
configuration dataclasses.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import (
    TIME_UNIT_DIVISORS,
    MonitorConfig,
    StorageConfig,
    TracerConfig,
)
from ..validation import (
    ValidationError,
    parse_seconds_duration,
    validate_boolean,
    validate_cpu_list,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

# The timerlat period is capped at one second.
MAX_PERIOD_US = 1_000_000


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw `[monitor]` table from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    general_settings = monitor_data.get("general", {})
    collection_settings = monitor_data.get("collection", {})

    time_unit = validate_enum_choice(
        general_settings.get("time_unit", "us"),
        valid_choices=list(TIME_UNIT_DIVISORS),
        field_name="monitor.general.time_unit",
        case_sensitive=False,
    )
    quiet = validate_boolean(
        general_settings.get("quiet", False),
        field_name="monitor.general.quiet",
    )
    debug = validate_boolean(
        general_settings.get("debug", False),
        field_name="monitor.general.debug",
    )

    poll_interval_seconds = validate_positive_float(
        collection_settings.get("poll_interval_seconds", 1.0),
        min_value=0.001,  # 1ms minimum
        max_value=3600.0,
        field_name="monitor.collection.poll_interval_seconds",
    )

    raw_duration = collection_settings.get("duration_seconds", 0)
    if raw_duration in (0, "0", ""):
        duration_seconds = 0
    else:
        duration_seconds = parse_seconds_duration(
            raw_duration, field_name="monitor.collection.duration_seconds"
        )

    config = MonitorConfig(
        time_unit=time_unit,
        quiet=quiet,
        debug=debug,
        poll_interval_seconds=poll_interval_seconds,
        duration_seconds=duration_seconds,
        tracer=validate_tracer_config(monitor_data.get("tracer", {})),
        storage=validate_storage_config(monitor_data.get("storage", {})),
    )
    logger.debug(f"Validated monitor configuration: {config}")
    return config


def validate_tracer_config(tracer_data: Dict[str, Any]) -> TracerConfig:
    """
    Validate the `[monitor.tracer]` table.

    Raises:
        ValidationError: If validation fails
    """
    tracefs_root = tracer_data.get("tracefs_root", "")
    if not isinstance(tracefs_root, str):
        raise ValidationError(
            "monitor.tracer.tracefs_root must be a string",
            field_name="monitor.tracer.tracefs_root",
            value=tracefs_root,
        )

    instance_name = tracer_data.get("instance_name", "timerlat_top")
    if not isinstance(instance_name, str) or not instance_name.strip() or "/" in instance_name:
        raise ValidationError(
            "monitor.tracer.instance_name must be a non-empty name without '/'",
            field_name="monitor.tracer.instance_name",
            value=instance_name,
        )

    cpus = validate_cpu_list(
        tracer_data.get("cpus", ""), field_name="monitor.tracer.cpus"
    )

    thresholds = {}
    for key in ("stop_irq_us", "stop_thread_us", "print_stack_us"):
        thresholds[key] = validate_positive_integer(
            tracer_data.get(key, 0),
            min_value=0,
            field_name=f"monitor.tracer.{key}",
        )

    period_us = validate_positive_integer(
        tracer_data.get("period_us", 0),
        min_value=0,
        max_value=MAX_PERIOD_US,
        field_name="monitor.tracer.period_us",
    )

    return TracerConfig(
        tracefs_root=tracefs_root.strip(),
        instance_name=instance_name.strip(),
        cpus=cpus,
        period_us=period_us,
        trace_output=_optional_path(
            tracer_data.get("trace_output", ""), "monitor.tracer.trace_output"
        ),
        **thresholds,
    )


def validate_storage_config(storage_data: Dict[str, Any]) -> StorageConfig:
    """
    Validate the `[monitor.storage]` table.

    Raises:
        ValidationError: If validation fails
    """
    format_type = validate_enum_choice(
        storage_data.get("format", "parquet"),
        valid_choices=["parquet", "json"],
        field_name="monitor.storage.format",
    )
    compression = validate_enum_choice(
        storage_data.get("compression", "snappy"),
        valid_choices=["snappy", "gzip", "brotli", "lz4", "zstd"],
        field_name="monitor.storage.compression",
    )
    return StorageConfig(
        summary_output=_optional_path(
            storage_data.get("summary_output", ""), "monitor.storage.summary_output"
        ),
        format=format_type,
        compression=compression,
    )


def _optional_path(value: Any, field_name: str) -> Optional[Path]:
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string", field_name=field_name, value=value
        )
    value = value.strip()
    return Path(value) if value else None
