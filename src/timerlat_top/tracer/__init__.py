"""
Tracer adapters.

Everything that touches the kernel's tracing subsystem lives here; the rest
of the package only sees typed samples and TracerError.
"""

from .base import AbstractTracerSession, TracerError
from .parser import parse_timerlat_line, parse_timerlat_lines
from .recorder import TraceRecorder
from .session import TIMERLAT_TRACER, TimerlatSession
from .tracefs import OsnoiseConfig, TracefsInstance, find_tracefs_root

__all__ = [
    "AbstractTracerSession",
    "TracerError",
    "parse_timerlat_line",
    "parse_timerlat_lines",
    "TraceRecorder",
    "TIMERLAT_TRACER",
    "TimerlatSession",
    "OsnoiseConfig",
    "TracefsInstance",
    "find_tracefs_root",
]
