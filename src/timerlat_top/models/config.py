"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`
and overridden from the command line.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

# Divisors applied to nanosecond latencies for each display unit.
TIME_UNIT_DIVISORS = {"ns": 1, "us": 1000}

DEFAULT_TRACE_OUTPUT = "timerlat_trace.txt"


@dataclass
class StorageConfig:
    """
    Settings for exporting the final per-CPU summary, loaded from `[monitor.storage]`.

    Attributes:
        summary_output: Destination file; None disables the export
        format: 'parquet' (columnar, compressed) or 'json' (human readable)
        compression: Compression algorithm, only used by the parquet format
    """

    summary_output: Optional[Path] = None
    format: Literal["parquet", "json"] = "parquet"
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"


@dataclass
class TracerConfig:
    """
    Settings handed to the timerlat tracer, loaded from `[monitor.tracer]`.

    Zero means "leave the kernel default untouched" for the numeric knobs.
    """

    # Mount point of tracefs; empty means auto-detect.
    tracefs_root: str = ""
    # Name of the tracefs instance created for the run.
    instance_name: str = "timerlat_top"
    # CPU list string such as "0-3,5"; empty means all CPUs.
    cpus: str = ""
    # Tracer stops itself when an IRQ latency exceeds this many microseconds.
    stop_irq_us: int = 0
    # Tracer stops itself when a thread latency exceeds this many microseconds.
    stop_thread_us: int = 0
    # Timer period in microseconds.
    period_us: int = 0
    # Save a stack trace when a thread latency exceeds this many microseconds.
    print_stack_us: int = 0
    # File the recorded trace is saved to when the tracer stops itself.
    trace_output: Optional[Path] = None


@dataclass
class MonitorConfig:
    """
    Configuration for the monitor's behavior, loaded from `config.toml`.
    """

    # [monitor.general]
    time_unit: str = "us"
    quiet: bool = False
    debug: bool = False

    # [monitor.collection]
    poll_interval_seconds: float = 1.0
    # Zero means run until interrupted or until the tracer stops itself.
    duration_seconds: int = 0

    # [monitor.tracer]
    tracer: TracerConfig = field(default_factory=TracerConfig)

    # [monitor.storage]
    storage: StorageConfig = field(default_factory=StorageConfig)

    @property
    def output_divisor(self) -> int:
        return TIME_UNIT_DIVISORS[self.time_unit]


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    monitor: MonitorConfig
    # File the configuration was loaded from, None when built-in defaults were used.
    source: Optional[Path] = None
