"""
Access to tracefs and its trace instances.

A trace instance is a directory under ``<tracefs>/instances`` with its own
ring buffer, tracer selection and on/off switch. Every filesystem failure is
reported as a TracerError naming the failed step.
"""

import errno
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from .base import TracerError

logger = logging.getLogger(__name__)

TRACEFS_CANDIDATES = ("/sys/kernel/tracing", "/sys/kernel/debug/tracing")

_PIPE_READ_SIZE = 64 * 1024


def find_tracefs_root(configured: str = "") -> Path:
    """Locate the tracefs mount point.

    Args:
        configured: Explicit mount point; empty means search the usual locations.

    Raises:
        TracerError: If no usable tracefs directory is found.
    """
    candidates = [configured] if configured else list(TRACEFS_CANDIDATES)
    for candidate in candidates:
        path = Path(candidate)
        if (path / "instances").is_dir():
            logger.debug(f"Using tracefs at {path}")
            return path
    raise TracerError(
        "locate tracefs",
        f"tracefs not found (tried {', '.join(candidates)}); is it mounted?",
    )


class TracefsInstance:
    """A named trace instance below ``<tracefs>/instances``."""

    def __init__(self, tracefs_root: Path, name: str):
        self.tracefs_root = Path(tracefs_root)
        self.name = name
        self.path = self.tracefs_root / "instances" / name
        self._created = False

    def create(self) -> None:
        """Create the instance; an existing instance is reused and left in place."""
        try:
            self.path.mkdir()
            self._created = True
            logger.debug(f"Created trace instance {self.path}")
        except FileExistsError:
            logger.warning(f"Trace instance {self.name} already exists, reusing it")
        except OSError as e:
            raise TracerError("create instance", f"Failed to create trace instance {self.name}: {e}") from e

    def destroy(self) -> None:
        """Remove the instance if this object created it."""
        if not self._created:
            return
        try:
            self.path.rmdir()
            logger.debug(f"Removed trace instance {self.path}")
        except OSError as e:
            logger.warning(f"Failed to remove trace instance {self.path}: {e}")
        finally:
            self._created = False

    def write(self, file_name: str, value: str) -> None:
        try:
            (self.path / file_name).write_text(value)
        except OSError as e:
            raise TracerError(
                f"write {file_name}", f"Failed to write '{value}' to {self.path / file_name}: {e}"
            ) from e

    def read(self, file_name: str) -> str:
        try:
            return (self.path / file_name).read_text()
        except OSError as e:
            raise TracerError(f"read {file_name}", f"Failed to read {self.path / file_name}: {e}") from e

    def set_tracer(self, tracer: str) -> None:
        self.write("current_tracer", tracer)

    def enable(self) -> None:
        self.write("tracing_on", "1")

    def disable(self) -> None:
        self.write("tracing_on", "0")

    def is_on(self) -> bool:
        return self.read("tracing_on").strip() == "1"

    def open_pipe(self) -> int:
        """Open trace_pipe for non-blocking, consuming reads."""
        try:
            return os.open(self.path / "trace_pipe", os.O_RDONLY | os.O_NONBLOCK)
        except OSError as e:
            raise TracerError("open trace_pipe", f"Failed to open {self.path / 'trace_pipe'}: {e}") from e

    @staticmethod
    def drain_pipe(fd: int) -> bytes:
        """Read everything currently buffered in an open trace_pipe."""
        chunks: List[bytes] = []
        while True:
            try:
                chunk = os.read(fd, _PIPE_READ_SIZE)
            except BlockingIOError:
                break
            except OSError as e:
                if e.errno in (errno.EAGAIN, errno.EINTR):
                    break
                raise TracerError("read samples", f"Error iterating on events: {e}") from e
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def save_trace(self, destination: Path) -> None:
        """Copy the instance's (non-consuming) trace file to destination."""
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path / "trace", "rb") as src, open(destination, "wb") as dst:
                shutil.copyfileobj(src, dst)
        except OSError as e:
            raise TracerError("save trace", f"Failed to save trace to {destination}: {e}") from e


class OsnoiseConfig:
    """
    The global timerlat knobs under ``<tracefs>/osnoise``.

    Values in place before apply() are remembered and written back by restore().
    """

    def __init__(self, tracefs_root: Path):
        self.path = Path(tracefs_root) / "osnoise"
        self._saved: List[tuple] = []

    def _set(self, file_name: str, value: str, error_message: str) -> None:
        target = self.path / file_name
        try:
            previous: Optional[str] = target.read_text().strip()
        except OSError:
            previous = None
        try:
            target.write_text(value)
        except OSError as e:
            raise TracerError("apply config", f"{error_message}: {e}") from e
        if previous is not None:
            self._saved.append((file_name, previous))
        logger.debug(f"Set osnoise/{file_name} = {value} (was {previous})")

    def apply(self, cpus: str = "", stop_irq_us: int = 0, stop_thread_us: int = 0,
              period_us: int = 0, print_stack_us: int = 0) -> None:
        """Write every non-default knob.

        Raises:
            TracerError: On the first knob the kernel rejects.
        """
        if cpus:
            self._set("cpus", cpus, "Failed to apply CPUs config")
        if stop_irq_us:
            self._set("stop_tracing_us", str(stop_irq_us), "Failed to set stop us")
        if stop_thread_us:
            self._set("stop_tracing_total_us", str(stop_thread_us), "Failed to set stop total us")
        if period_us:
            self._set("timerlat_period_us", str(period_us), "Failed to set timerlat period")
        if print_stack_us:
            self._set("print_stack", str(print_stack_us), "Failed to set print stack")

    def restore(self) -> None:
        """Write back the values replaced by apply(), newest first."""
        while self._saved:
            file_name, value = self._saved.pop()
            try:
                (self.path / file_name).write_text(value)
            except OSError as e:
                logger.warning(f"Failed to restore osnoise/{file_name} to '{value}': {e}")
