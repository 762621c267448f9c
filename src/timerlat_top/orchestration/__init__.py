"""
Run orchestration: the monitor loop, its stop controller and signal wiring.
"""

from .monitor_loop import STOP_TRACING_NOTICE, MonitorLoop
from .signal_handler import SignalHandler
from .stop_controller import StopController

__all__ = [
    "STOP_TRACING_NOTICE",
    "MonitorLoop",
    "SignalHandler",
    "StopController",
]
