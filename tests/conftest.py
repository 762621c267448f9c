"""
Pytest configuration and shared fixtures for the timerlat_top test suite.

This module provides common fixtures, fake tracer collaborators and
configuration helpers for all test modules.
"""

import sys
from pathlib import Path
from typing import Iterable, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from timerlat_top.config import reset_config_path  # noqa: E402
from timerlat_top.models import MonitorConfig, Sample, TracerConfig  # noqa: E402
from timerlat_top.tracer import AbstractTracerSession, TracerError  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Fake collaborators
# ============================================================================


class FakeTracerSession(AbstractTracerSession):
    """
    Scripted tracer session.

    Args:
        batches: Samples returned by successive read_samples() calls; once
                 exhausted, every further call returns an empty list.
        deactivate_after: Number of polls after which the tracer reports
                          itself inactive; None keeps it active forever.
        fail_on_poll: 1-based poll number on which read_samples() raises.
        fail_on_start: Make start() raise TracerError.
    """

    def __init__(
        self,
        batches: Optional[Iterable[List[Sample]]] = None,
        deactivate_after: Optional[int] = None,
        fail_on_poll: Optional[int] = None,
        fail_on_start: bool = False,
    ):
        super().__init__()
        self.batches = list(batches or [])
        self.deactivate_after = deactivate_after
        self.fail_on_poll = fail_on_poll
        self.fail_on_start = fail_on_start
        self.polls = 0
        self.started = False
        self.stopped = False

    def start(self) -> None:
        if self.fail_on_start:
            raise TracerError("apply config", "Failed to apply CPUs config")
        self.started = True

    def read_samples(self) -> List[Sample]:
        self.polls += 1
        if self.fail_on_poll is not None and self.polls == self.fail_on_poll:
            raise TracerError("read samples", "Error iterating on events")
        if self.batches:
            return self.batches.pop(0)
        return []

    def is_tracing_active(self) -> bool:
        if self.deactivate_after is None:
            return True
        return self.polls < self.deactivate_after

    def stop(self) -> None:
        self.stopped = True


class FakeRecorder:
    """Stands in for TraceRecorder; remembers what it was asked to do."""

    def __init__(self, fail_on_save: bool = False):
        self.fail_on_save = fail_on_save
        self.started = False
        self.stopped = False
        self.saved_to: Optional[Path] = None

    def start(self) -> None:
        self.started = True

    def save(self, destination: Path) -> None:
        if self.fail_on_save:
            raise TracerError("save trace", f"Failed to save trace to {destination}")
        self.saved_to = Path(destination)

    def stop(self) -> None:
        self.stopped = True


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config_state():
    """Keep the configuration singleton and its file path from leaking between tests."""
    reset_config_path()
    yield
    reset_config_path()


@pytest.fixture
def monitor_config():
    """A fast-polling monitor configuration."""
    return MonitorConfig(
        time_unit="us",
        quiet=False,
        debug=False,
        poll_interval_seconds=0.001,
        duration_seconds=0,
        tracer=TracerConfig(),
    )


@pytest.fixture
def sample_config_data():
    """Sample `[monitor]` table as loaded from config.toml."""
    return {
        "general": {"time_unit": "us", "quiet": False, "debug": False},
        "collection": {"poll_interval_seconds": 0.5, "duration_seconds": "10m"},
        "tracer": {
            "tracefs_root": "",
            "instance_name": "timerlat_top",
            "cpus": "0-3",
            "stop_irq_us": 0,
            "stop_thread_us": 100,
            "period_us": 1000,
            "print_stack_us": 0,
            "trace_output": "",
        },
        "storage": {"summary_output": "", "format": "parquet", "compression": "snappy"},
    }


@pytest.fixture
def fake_tracefs(tmp_path):
    """
    A directory laid out like tracefs: ``instances/`` plus the osnoise knobs.

    The kernel populates instance directories itself; tests that need one
    pre-create it with the files they read.
    """
    root = tmp_path / "tracing"
    (root / "instances").mkdir(parents=True)
    osnoise = root / "osnoise"
    osnoise.mkdir()
    (osnoise / "cpus").write_text("0-7\n")
    (osnoise / "stop_tracing_us").write_text("0\n")
    (osnoise / "stop_tracing_total_us").write_text("0\n")
    (osnoise / "timerlat_period_us").write_text("1000\n")
    (osnoise / "print_stack").write_text("0\n")
    return root


def make_instance(tracefs_root: Path, name: str = "timerlat_top", pipe_text: str = "") -> Path:
    """Pre-create a trace instance directory with a trace_pipe file."""
    instance = tracefs_root / "instances" / name
    instance.mkdir(parents=True, exist_ok=True)
    (instance / "trace_pipe").write_text(pipe_text)
    (instance / "tracing_on").write_text("0\n")
    (instance / "current_tracer").write_text("nop\n")
    return instance


IRQ_LINE = "          <idle>-0     [{cpu:03d}] d.h1.   563.484341: #1 context    irq timer_latency {lat:9d} ns"
THREAD_LINE = "     timerlat/{cpu}-1006  [{cpu:03d}] .......   563.484356: #1 context thread timer_latency {lat:9d} ns"


def irq_line(cpu: int, latency: int) -> str:
    return IRQ_LINE.format(cpu=cpu, lat=latency)


def thread_line(cpu: int, latency: int) -> str:
    return THREAD_LINE.format(cpu=cpu, lat=latency)
