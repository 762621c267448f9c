"""
Latency statistics data models.

This module contains the per-CPU running aggregates kept for the lifetime of a
monitoring run and the typed sample delivered by tracer adapters.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Sample:
    """
    A single timer latency event.

    Attributes:
        cpu: Index of the CPU the event was recorded on.
        is_thread_context: True for thread-context latency, False for IRQ.
        latency: Latency in nanoseconds.
    """

    cpu: int
    is_thread_context: bool
    latency: int


@dataclass
class ContextStats:
    """
    Running aggregates for one latency context (IRQ or thread) of one CPU.

    ``min`` stays None until the first sample is applied.
    """

    count: int = 0
    cur: int = 0
    min: Optional[int] = None
    sum: int = 0
    max: int = 0

    @property
    def avg(self) -> Optional[int]:
        """Truncated mean, or None when no sample was seen."""
        if not self.count:
            return None
        return self.sum // self.count


@dataclass
class PerCpuStats:
    """Interrupt and thread context aggregates for a single CPU."""

    irq: ContextStats = field(default_factory=ContextStats)
    thread: ContextStats = field(default_factory=ContextStats)

    def context(self, is_thread_context: bool) -> ContextStats:
        return self.thread if is_thread_context else self.irq

    @property
    def irq_count(self) -> int:
        return self.irq.count

    @property
    def thread_count(self) -> int:
        return self.thread.count

    @property
    def has_samples(self) -> bool:
        return bool(self.irq.count or self.thread.count)


class StatsStore:
    """
    Fixed-size table of PerCpuStats indexed by CPU id.

    The size is chosen once, when the store is created, and never changes.
    """

    def __init__(self, nr_cpus: int):
        if not isinstance(nr_cpus, int) or nr_cpus <= 0:
            raise ValueError(f"StatsStore needs a positive CPU count, got {nr_cpus!r}")
        self._cpus: List[PerCpuStats] = [PerCpuStats() for _ in range(nr_cpus)]

    @property
    def nr_cpus(self) -> int:
        return len(self._cpus)

    def __len__(self) -> int:
        return len(self._cpus)

    def __getitem__(self, cpu: int) -> PerCpuStats:
        if not 0 <= cpu < len(self._cpus):
            raise IndexError(f"CPU {cpu} is outside the monitored range 0-{len(self._cpus) - 1}")
        return self._cpus[cpu]

    def items(self) -> Iterator[Tuple[int, PerCpuStats]]:
        """Yield (cpu, stats) pairs in increasing CPU order."""
        return iter(enumerate(self._cpus))
