"""
Defines the interface between the monitor loop and a latency tracer.

This module provides:
- TracerError: the single exception type raised by tracer adapters.
- AbstractTracerSession: an abstract base class (ABC) every tracer session
  implements. A session enables tracing, hands over the samples gathered
  since the previous call and tells whether tracing is still active.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from ..models.stats import Sample

logger = logging.getLogger(__name__)


class TracerError(Exception):
    """
    Raised when the tracer cannot be configured, started or read.

    Attributes:
        step: Short name of the step that failed (e.g. "apply config",
              "enable tracer", "read samples").
    """

    def __init__(self, step: str, message: str):
        super().__init__(message)
        self.step = step


class AbstractTracerSession(ABC):
    """
    Abstract base class for tracer sessions.

    Subclasses own every interaction with the tracing subsystem; the monitor
    loop only sees typed Sample values and a boolean "still tracing" answer.
    read_samples() is called synchronously once per poll interval and should
    return promptly: a slow call delays the loop's reaction to stop requests
    by the same amount.
    """

    def __init__(self):
        logger.info(f"Initializing {self.__class__.__name__}")

    @abstractmethod
    def start(self) -> None:
        """
        Configure and enable tracing.

        Raises:
            TracerError: If the tracer rejects the configuration or cannot be enabled.
        """

    @abstractmethod
    def read_samples(self) -> List[Sample]:
        """
        Return every sample produced since the previous call, in arrival order.

        Raises:
            TracerError: If the samples cannot be retrieved.
        """

    @abstractmethod
    def is_tracing_active(self) -> bool:
        """Return False once the tracer has switched itself off."""

    @abstractmethod
    def stop(self) -> None:
        """
        Disable tracing and release every resource acquired by start().

        Must be safe to call after a failed or partial start().
        """
