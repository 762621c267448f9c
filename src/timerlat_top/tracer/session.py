"""
Timerlat tracer session backed by tracefs.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from ..models.config import TracerConfig
from ..models.stats import Sample
from .base import AbstractTracerSession, TracerError
from .parser import parse_timerlat_lines
from .tracefs import OsnoiseConfig, TracefsInstance, find_tracefs_root

logger = logging.getLogger(__name__)

TIMERLAT_TRACER = "timerlat"


class TimerlatSession(AbstractTracerSession):
    """
    Runs the timerlat tracer in a dedicated trace instance and reads its
    events from ``trace_pipe``.

    Reads are non-blocking: each read_samples() call drains what the kernel
    buffered since the previous call and returns immediately.
    """

    def __init__(self, tracer_config: TracerConfig):
        super().__init__()
        self.tracer_config = tracer_config
        self.tracefs_root: Optional[Path] = None
        self.instance: Optional[TracefsInstance] = None
        self.osnoise: Optional[OsnoiseConfig] = None
        self._pipe_fd: Optional[int] = None
        self._partial = ""

    def start(self) -> None:
        config = self.tracer_config
        self.tracefs_root = find_tracefs_root(config.tracefs_root)

        self.osnoise = OsnoiseConfig(self.tracefs_root)
        self.osnoise.apply(
            cpus=config.cpus,
            stop_irq_us=config.stop_irq_us,
            stop_thread_us=config.stop_thread_us,
            period_us=config.period_us,
            print_stack_us=config.print_stack_us,
        )

        self.instance = TracefsInstance(self.tracefs_root, config.instance_name)
        self.instance.create()
        self.instance.disable()
        try:
            self.instance.set_tracer(TIMERLAT_TRACER)
        except TracerError as e:
            raise TracerError("enable tracer", f"Failed to enable timerlat tracer: {e}") from e
        self._pipe_fd = self.instance.open_pipe()
        self.instance.enable()
        logger.info(f"timerlat tracer enabled in instance {self.instance.path}")

    def read_samples(self) -> List[Sample]:
        if self._pipe_fd is None or self.instance is None:
            raise TracerError("read samples", "Tracer session is not started")

        data = self.instance.drain_pipe(self._pipe_fd)
        if not data:
            return []

        text = self._partial + data.decode("utf-8", errors="replace")
        lines = text.split("\n")
        # The last element is an unterminated line (or "") kept for the next read.
        self._partial = lines.pop()
        return list(parse_timerlat_lines(lines))

    def is_tracing_active(self) -> bool:
        if self.instance is None:
            return False
        return self.instance.is_on()

    def stop(self) -> None:
        if self._pipe_fd is not None:
            try:
                os.close(self._pipe_fd)
            except OSError as e:
                logger.debug(f"Closing trace_pipe failed: {e}")
            self._pipe_fd = None

        if self.instance is not None:
            try:
                self.instance.disable()
                self.instance.set_tracer("nop")
            except TracerError as e:
                logger.warning(f"Failed to disable tracing in {self.instance.path}: {e}")
            self.instance.destroy()
            self.instance = None

        if self.osnoise is not None:
            self.osnoise.restore()
            self.osnoise = None
        logger.info("timerlat tracer session stopped")
