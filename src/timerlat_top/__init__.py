"""
timerlat_top: live per-CPU summary of timer latency.

The package samples timerlat tracer events, folds them into per-CPU running
statistics and keeps a table of current, minimum, average and maximum IRQ and
thread latencies on screen until the run is stopped.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- system: CPU discovery
- tracer: tracefs adapters producing typed samples
- monitoring: Sample aggregation and table rendering
- orchestration: Monitor loop, stop controller and signal wiring
- storage: Export of the final summary
- cli: Command-line interface

Usage:
    From command line:
        timerlat-top [options]

    Programmatically:
        from timerlat_top import MonitorLoop, TimerlatSession, get_config
        config = get_config().monitor
        result = MonitorLoop(TimerlatSession(config.tracer), config).run()
"""

from .config import get_config, clear_config_cache, set_config_path
from .cli import main_cli

from .models import (
    AppConfig,
    ContextStats,
    ExitReason,
    MonitorConfig,
    MonitorState,
    PerCpuStats,
    RunResult,
    Sample,
    StatsStore,
    StorageConfig,
    TracerConfig,
)
from .monitoring import Aggregator, apply, render
from .orchestration import MonitorLoop, StopController
from .tracer import AbstractTracerSession, TimerlatSession, TraceRecorder, TracerError
from .validation import ValidationError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    "MonitorLoop",
    "StopController",
    # Models
    "AppConfig",
    "ContextStats",
    "ExitReason",
    "MonitorConfig",
    "MonitorState",
    "PerCpuStats",
    "RunResult",
    "Sample",
    "StatsStore",
    "StorageConfig",
    "TracerConfig",
    # Statistics
    "Aggregator",
    "apply",
    "render",
    # Tracer
    "AbstractTracerSession",
    "TimerlatSession",
    "TraceRecorder",
    "TracerError",
    # Validation
    "ValidationError",
]
