"""
Command-line interface for timerlat-top.

This module parses the command line, merges it over the TOML configuration,
prepares the tracer session and runs the monitor loop.

Usage:
    timerlat-top [-h] [-q] [-d s] [-D] [-n] [-p us] [-i us] [-T us] [-s us]
                 [-t [file]] [-c cpu-list] [--poll-interval s] [--summary file]
                 [--config file]

Example:
    timerlat-top -c 0-3 -d 10m -T 100 -t
"""

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import MAX_PERIOD_US, get_config, get_config_info, set_config_path
from ..models.config import DEFAULT_TRACE_OUTPUT, MonitorConfig
from ..orchestration import MonitorLoop, StopController
from ..tracer import TimerlatSession, TraceRecorder, TracerError, find_tracefs_root
from ..validation import (
    ValidationError,
    handle_cli_error,
    parse_seconds_duration,
    validate_cpu_list,
    validate_positive_float,
    validate_positive_integer,
)

# --- Logging Setup ---
# Log records go to stderr so they never interleave with the table on stdout.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timerlat-top",
        description="A per-cpu summary of the timer latency.",
    )
    parser.add_argument("-c", "--cpus", type=str, help="run the tracer only on the given cpus (e.g. 0-3,5)")
    parser.add_argument("-d", "--duration", type=str, help="duration of the session: time[s|m|h|d]")
    parser.add_argument("-D", "--debug", action="store_true", help="print debug info")
    parser.add_argument("-i", "--irq", type=str, metavar="US",
                        help="stop trace if the irq latency is higher than the argument in us")
    parser.add_argument("-T", "--thread", type=str, metavar="US",
                        help="stop trace if the thread latency is higher than the argument in us")
    parser.add_argument("-s", "--stack", type=str, metavar="US",
                        help="save the stack trace at the IRQ if a thread latency is higher than the argument in us")
    parser.add_argument("-p", "--period", type=str, metavar="US", help="timerlat period in us")
    parser.add_argument("-n", "--nano", action="store_true", help="display data in nanoseconds")
    parser.add_argument("-q", "--quiet", action="store_true", help="print only a summary at the end")
    parser.add_argument("-t", "--trace", nargs="?", const=DEFAULT_TRACE_OUTPUT, metavar="FILE",
                        help=f"save the stopped trace to FILE (default: {DEFAULT_TRACE_OUTPUT})")
    parser.add_argument("--poll-interval", type=str, metavar="SECONDS",
                        help="seconds between two reads of the tracer buffer")
    parser.add_argument("--summary", type=str, metavar="FILE",
                        help="export the final per-cpu statistics to FILE")
    parser.add_argument("--config", type=str, metavar="FILE", help="alternate configuration file")
    return parser


def apply_cli_overrides(monitor_config: MonitorConfig, args: argparse.Namespace) -> MonitorConfig:
    """
    Return a copy of monitor_config with the command-line options applied.

    Raises:
        ValidationError: If an option value is invalid.
    """
    tracer = monitor_config.tracer
    tracer_changes = {}
    if args.cpus is not None:
        cpus = validate_cpu_list(args.cpus, field_name="--cpus")
        if not cpus:
            raise ValidationError("Invalid -c cpu list", field_name="--cpus", value=args.cpus)
        tracer_changes["cpus"] = cpus
    if args.irq is not None:
        tracer_changes["stop_irq_us"] = validate_positive_integer(args.irq, field_name="--irq")
    if args.thread is not None:
        tracer_changes["stop_thread_us"] = validate_positive_integer(args.thread, field_name="--thread")
    if args.stack is not None:
        tracer_changes["print_stack_us"] = validate_positive_integer(args.stack, field_name="--stack")
    if args.period is not None:
        period = validate_positive_integer(args.period, field_name="--period")
        if period > MAX_PERIOD_US:
            raise ValidationError("Period longer than 1 s", field_name="--period", value=args.period)
        tracer_changes["period_us"] = period
    if args.trace is not None:
        trace_output = args.trace.lstrip("=")
        tracer_changes["trace_output"] = Path(trace_output or DEFAULT_TRACE_OUTPUT)

    changes = {}
    if tracer_changes:
        changes["tracer"] = dataclasses.replace(tracer, **tracer_changes)
    if args.duration is not None:
        changes["duration_seconds"] = parse_seconds_duration(args.duration, field_name="--duration")
    if args.poll_interval is not None:
        changes["poll_interval_seconds"] = validate_positive_float(
            args.poll_interval, min_value=0.001, field_name="--poll-interval"
        )
    if args.nano:
        changes["time_unit"] = "ns"
    if args.quiet:
        changes["quiet"] = True
    if args.debug:
        changes["debug"] = True
    if args.summary is not None:
        changes["storage"] = dataclasses.replace(
            monitor_config.storage, summary_output=Path(args.summary)
        )

    return dataclasses.replace(monitor_config, **changes)


def create_tracer(monitor_config: MonitorConfig) -> Tuple[TimerlatSession, Optional[TraceRecorder]]:
    """
    Build the tracer session and, when a trace output is configured, the recorder.

    Raises:
        TracerError: If tracefs cannot be located.
    """
    tracefs_root = find_tracefs_root(monitor_config.tracer.tracefs_root)
    tracer_config = dataclasses.replace(monitor_config.tracer, tracefs_root=str(tracefs_root))
    session = TimerlatSession(tracer_config)

    recorder = None
    if tracer_config.trace_output is not None:
        recorder = TraceRecorder(tracefs_root, f"{tracer_config.instance_name}_trace")
    return session, recorder


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for timerlat-top.

    Raises:
        SystemExit: Always; 0 after a normal or signaled stop, 1 on errors.
    """
    args = build_parser().parse_args(argv)

    if args.config:
        set_config_path(Path(args.config))

    try:
        app_config = get_config()
    except (FileNotFoundError, ValidationError, ValueError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    try:
        monitor_config = apply_cli_overrides(app_config.monitor, args)
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="option validation",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    if monitor_config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug(f"Configuration state: {get_config_info()}")

    if not monitor_config.tracer.tracefs_root and os.geteuid() != 0:
        logger.error("timerlat-top needs root permission")
        sys.exit(1)

    try:
        session, recorder = create_tracer(monitor_config)
    except TracerError as e:
        handle_cli_error(
            error=e,
            context="tracer setup",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    loop = MonitorLoop(
        session=session,
        config=monitor_config,
        stop_controller=StopController(),
        recorder=recorder,
    )
    result = loop.run()
    if not result.succeeded:
        logger.error(f"timerlat-top failed: {result.error}")
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main_cli()
