"""
The monitor loop: poll the tracer, aggregate, render, stop.

States run INIT -> RUNNING -> DRAINING -> STOPPED on a single thread. Stop
requests arrive asynchronously through the StopController and are acted on
once per iteration, after the samples of that poll have been applied.
"""

import logging
import sys
import time
from typing import Callable, Optional, Set, TextIO

from ..models.config import MonitorConfig
from ..models.runtime import ExitReason, MonitorState, RunResult
from ..models.stats import StatsStore
from ..monitoring.aggregator import Aggregator
from ..monitoring.renderer import render
from ..storage.summary import export_summary
from ..system.cpu import get_configured_cpu_count, resolve_monitored_cpus
from ..tracer.base import AbstractTracerSession, TracerError
from ..tracer.recorder import TraceRecorder
from ..validation import ErrorSeverity, ValidationError, handle_error, handle_tracer_error
from .signal_handler import SignalHandler
from .stop_controller import StopController

logger = logging.getLogger(__name__)

STOP_TRACING_NOTICE = "timerlat_top hit stop tracing"


class MonitorLoop:
    """
    Drives one monitoring run against a tracer session.

    The loop is the only writer of the statistics table, and rendering only
    happens after the samples of an iteration have all been applied, so no
    locking is involved. The session's read_samples() is called synchronously:
    if it blocks for longer than the poll interval, reaction to stop requests
    is delayed accordingly. The run duration does not depend on it, since the
    duration trigger fires asynchronously.
    """

    def __init__(
        self,
        session: AbstractTracerSession,
        config: MonitorConfig,
        stop_controller: Optional[StopController] = None,
        recorder: Optional[TraceRecorder] = None,
        nr_cpus: Optional[int] = None,
        output: Optional[TextIO] = None,
        install_signals: bool = True,
        color: Optional[bool] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.config = config
        self.stop_controller = stop_controller or StopController()
        self.recorder = recorder
        self.output = output if output is not None else sys.stdout
        self.install_signals = install_signals
        self.color = color if color is not None else _is_tty(self.output)
        self.clock = clock

        self._requested_cpus = nr_cpus
        self.signal_handler = SignalHandler(self.stop_controller)

        self.state = MonitorState.INIT
        self.store: Optional[StatsStore] = None
        self.aggregator: Optional[Aggregator] = None
        self.monitored_cpus: Optional[Set[int]] = None
        self.start_time = 0.0
        self.renders = 0
        self.final_renders = 0
        self.final_snapshot = ""
        self.result: Optional[RunResult] = None

    def run(self) -> RunResult:
        """
        Execute the whole run and return its outcome.

        Fatal errors are logged with the failing step and turned into a
        result with a non-zero exit code; resources are released either way.
        """
        try:
            try:
                self._initialize()
            except (TracerError, ValidationError, ValueError, RuntimeError) as e:
                return self._fail(ExitReason.INIT_FAILED, "initialization", e)

            try:
                reason = self._poll_until_stopped()
            except (TracerError, IndexError) as e:
                return self._fail(ExitReason.INGESTION_FAILED, "sample ingestion", e)
            except OSError as e:
                return self._fail(ExitReason.OUTPUT_FAILED, "writing output", e)

            try:
                self._drain(reason)
            except OSError as e:
                return self._fail(ExitReason.OUTPUT_FAILED, "writing output", e)
            return self.result
        finally:
            self._shutdown()

    def _initialize(self) -> None:
        self.state = MonitorState.INIT
        nr_cpus = self._requested_cpus or get_configured_cpu_count()
        self.store = StatsStore(nr_cpus)
        self.aggregator = Aggregator(self.store)
        self.monitored_cpus = resolve_monitored_cpus(self.config.tracer.cpus, nr_cpus)
        logger.info(f"Monitoring {nr_cpus} CPUs, poll interval {self.config.poll_interval_seconds}s")

        if self.install_signals:
            self.signal_handler.setup_signal_handlers()

        self.session.start()
        if self.recorder is not None:
            self.recorder.start()

        if self.config.duration_seconds:
            self.signal_handler.arm_duration(self.config.duration_seconds)

        self.start_time = self.clock()
        self.state = MonitorState.RUNNING

    def _poll_until_stopped(self) -> ExitReason:
        while True:
            self.stop_controller.wait(self.config.poll_interval_seconds)

            applied = self.aggregator.ingest_all(self.session.read_samples())
            logger.debug(f"Applied {applied} samples")

            # Both may hold in the same cycle; the tracer stopping itself wins
            # because its trace is worth saving.
            if not self.session.is_tracing_active():
                logger.info("Tracer stopped itself")
                return ExitReason.TRACER_STOPPED
            if self.stop_controller.should_stop():
                logger.info("Stop requested")
                return ExitReason.STOP_REQUESTED

            if not self.config.quiet:
                self._emit()

    def _drain(self, reason: ExitReason) -> None:
        self.state = MonitorState.DRAINING
        self.final_snapshot = self._emit()
        self.final_renders += 1

        trace_saved = False
        if reason is ExitReason.TRACER_STOPPED:
            self._write(f"{STOP_TRACING_NOTICE}\n")
            trace_output = self.config.tracer.trace_output
            if trace_output is not None and self.recorder is not None:
                self._write(f"  Saving trace to {trace_output}\n")
                try:
                    self.recorder.save(trace_output)
                    trace_saved = True
                except TracerError as e:
                    handle_tracer_error(e, e.step, severity=ErrorSeverity.ERROR, reraise=False, logger=logger)

        if self.config.storage.summary_output is not None:
            try:
                export_summary(
                    self.store,
                    self.config.storage,
                    self.monitored_cpus,
                    metadata={
                        "reason": reason.value,
                        "duration_seconds": self.clock() - self.start_time,
                        "time_unit": "ns",
                    },
                )
            except Exception as e:
                handle_error(
                    error=e,
                    context=f"exporting summary to {self.config.storage.summary_output}",
                    severity=ErrorSeverity.ERROR,
                    reraise=False,
                    include_traceback=True,
                    logger=logger,
                )

        self.result = RunResult(
            exit_code=0,
            reason=reason,
            renders=self.renders,
            trace_saved=trace_saved,
        )

    def _shutdown(self) -> None:
        self.state = MonitorState.STOPPED
        self.signal_handler.cleanup_signal_handlers()
        try:
            self.session.stop()
        except TracerError as e:
            handle_tracer_error(e, e.step, severity=ErrorSeverity.WARNING, reraise=False, logger=logger)
        if self.recorder is not None:
            self.recorder.stop()
        self.aggregator = None
        self.store = None

    def _fail(self, reason: ExitReason, step: str, error: Exception) -> RunResult:
        if isinstance(error, TracerError):
            failed_step = error.step
            handle_tracer_error(error, failed_step, reraise=False, logger=logger)
        else:
            failed_step = step
            handle_error(error, failed_step, reraise=False, logger=logger)
        self.result = RunResult(
            exit_code=1,
            reason=reason,
            renders=self.renders,
            error=f"{failed_step}: {error}",
        )
        return self.result

    def _emit(self) -> str:
        text = render(
            self.store,
            self.config.output_divisor,
            self.config.quiet,
            monitored_cpus=self.monitored_cpus,
            elapsed_seconds=self.clock() - self.start_time,
            clear_screen=not self.config.debug,
            color=self.color,
        )
        self._write(text)
        self.renders += 1
        return text

    def _write(self, text: str) -> None:
        if not text:
            return
        self.output.write(text)
        self.output.flush()


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
