"""
Runtime data models.

This module contains the states and outcome of a single monitoring run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MonitorState(Enum):
    """Lifecycle states of a MonitorLoop."""
    INIT = "init"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class ExitReason(Enum):
    """Why the RUNNING state was left."""
    STOP_REQUESTED = "stop_requested"
    TRACER_STOPPED = "tracer_stopped"
    INIT_FAILED = "init_failed"
    INGESTION_FAILED = "ingestion_failed"
    OUTPUT_FAILED = "output_failed"


@dataclass
class RunResult:
    """Outcome of a monitoring run, returned to the process boundary."""

    exit_code: int
    reason: ExitReason
    renders: int = 0
    trace_saved: bool = False
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
