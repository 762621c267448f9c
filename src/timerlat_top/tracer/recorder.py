"""
Trace recorder: a second timerlat instance whose buffer is saved to a file
when the tracer stops itself.
"""

import logging
from pathlib import Path

from .base import TracerError
from .session import TIMERLAT_TRACER
from .tracefs import TracefsInstance

logger = logging.getLogger(__name__)


class TraceRecorder:
    """Keeps a full timerlat trace in its own instance for later persistence."""

    def __init__(self, tracefs_root: Path, instance_name: str):
        self.instance = TracefsInstance(tracefs_root, instance_name)
        self._started = False

    def start(self) -> None:
        """
        Raises:
            TracerError: If the recording instance cannot be enabled.
        """
        self.instance.create()
        try:
            self.instance.disable()
            self.instance.set_tracer(TIMERLAT_TRACER)
            self.instance.enable()
        except TracerError as e:
            raise TracerError("enable recorder", f"Failed to enable the trace instance: {e}") from e
        self._started = True
        logger.debug(f"Trace recorder running in {self.instance.path}")

    def save(self, destination: Path) -> None:
        """Stop recording and copy the recorded trace to destination.

        Raises:
            TracerError: If the trace cannot be written.
        """
        if not self._started:
            raise TracerError("save trace", "Trace recorder was never started")
        try:
            self.instance.disable()
        except TracerError as e:
            logger.debug(f"Recorder was already off: {e}")
        self.instance.save_trace(Path(destination))
        logger.info(f"Trace saved to {destination}")

    def stop(self) -> None:
        if self._started:
            try:
                self.instance.disable()
                self.instance.set_tracer("nop")
            except TracerError as e:
                logger.warning(f"Failed to disable trace recorder: {e}")
            self._started = False
        self.instance.destroy()
