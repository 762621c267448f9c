"""
Data models and structures for the monitoring system.

Configuration Models:
- Monitor, tracer and storage settings

Statistics Models:
- Typed latency samples
- Per-CPU running aggregates and the fixed-size store holding them

Runtime Models:
- Monitor loop states and the outcome of a run
"""

from .config import (
    DEFAULT_TRACE_OUTPUT,
    TIME_UNIT_DIVISORS,
    AppConfig,
    MonitorConfig,
    StorageConfig,
    TracerConfig,
)
from .runtime import ExitReason, MonitorState, RunResult
from .stats import ContextStats, PerCpuStats, Sample, StatsStore

__all__ = [
    # Configuration
    "DEFAULT_TRACE_OUTPUT",
    "TIME_UNIT_DIVISORS",
    "AppConfig",
    "MonitorConfig",
    "StorageConfig",
    "TracerConfig",
    # Runtime
    "ExitReason",
    "MonitorState",
    "RunResult",
    # Statistics
    "ContextStats",
    "PerCpuStats",
    "Sample",
    "StatsStore",
]
