"""
Signal handling for the monitor loop.

This module routes SIGINT, SIGTERM and the run-duration timer to a
StopController and restores the previous handlers afterwards.
"""

import logging
import signal
import threading
from typing import Any, Optional

from .stop_controller import StopController

logger = logging.getLogger(__name__)


class SignalHandler:
    """
    Manages signal registration and cleanup for one monitoring run.

    The installed handlers do nothing but call StopController.request_stop();
    in particular they do not log, since logging takes locks the interrupted
    code may hold.
    """

    def __init__(self, stop_controller: StopController):
        self.stop_controller = stop_controller
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._original_sigalrm_handler = None
        self._signal_handlers_set = False
        self._alarm_armed = False
        self._timer: Optional[threading.Timer] = None

    def setup_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to the stop controller."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._handle_signal)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._handle_signal)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for monitor loop")
        except ValueError as e:
            # signal.signal only works in the main thread of the interpreter.
            logger.warning(f"Failed to set up signal handlers: {e}")

    def arm_duration(self, seconds: float) -> None:
        """Request a stop after the given number of seconds.

        Uses SIGALRM from the main thread and a daemon timer thread otherwise.
        """
        if threading.current_thread() is threading.main_thread() and hasattr(signal, "setitimer"):
            self._original_sigalrm_handler = signal.signal(signal.SIGALRM, self._handle_signal)
            signal.setitimer(signal.ITIMER_REAL, seconds)
            self._alarm_armed = True
            logger.debug(f"Run duration armed via SIGALRM: {seconds}s")
        else:
            self._timer = threading.Timer(seconds, self.stop_controller.request_stop)
            self._timer.daemon = True
            self._timer.start()
            logger.debug(f"Run duration armed via timer thread: {seconds}s")

    def cleanup_signal_handlers(self) -> None:
        """Disarm the duration trigger and restore original signal handlers."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self._alarm_armed:
            signal.setitimer(signal.ITIMER_REAL, 0)
            if self._original_sigalrm_handler is not None:
                signal.signal(signal.SIGALRM, self._original_sigalrm_handler)
            self._alarm_armed = False

        if not self._signal_handlers_set:
            return

        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False

    def _handle_signal(self, signum: int, frame: Any) -> None:
        self.stop_controller.request_stop()
