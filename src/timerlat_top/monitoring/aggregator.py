"""
Sample aggregation.

Folds timer latency samples into the per-CPU running statistics. No I/O and
no allocation happens here; the monitor loop is the only caller.
"""

from typing import Iterable

from ..models.stats import PerCpuStats, Sample, StatsStore


def apply(stats: PerCpuStats, is_thread_context: bool, latency: int) -> None:
    """Apply one latency to the IRQ or thread record of a CPU.

    ``cur`` is overwritten with the newest value; count, min, sum and max
    are updated in place.
    """
    record = stats.context(is_thread_context)
    record.count += 1
    record.cur = latency
    if record.min is None or latency < record.min:
        record.min = latency
    record.sum += latency
    if latency > record.max:
        record.max = latency


class Aggregator:
    """Applies samples to a StatsStore in arrival order."""

    def __init__(self, store: StatsStore):
        self.store = store
        self.samples_applied = 0

    def ingest(self, sample: Sample) -> None:
        """Apply a single sample.

        Raises:
            IndexError: If the sample's CPU is outside the store.
        """
        apply(self.store[sample.cpu], sample.is_thread_context, sample.latency)
        self.samples_applied += 1

    def ingest_all(self, samples: Iterable[Sample]) -> int:
        """Apply every sample of a batch; returns how many were applied."""
        applied = 0
        for sample in samples:
            self.ingest(sample)
            applied += 1
        return applied
