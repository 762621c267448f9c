"""
Export of the final per-CPU latency summary.

One row per CPU that recorded at least one sample. Values are raw
nanoseconds; groups without samples hold nulls.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import polars as pl

from ..models.config import StorageConfig
from ..models.stats import ContextStats, StatsStore
from .factory import create_storage

logger = logging.getLogger(__name__)

SUMMARY_SCHEMA = {
    "cpu": pl.Int64,
    "irq_count": pl.Int64,
    "irq_cur": pl.Int64,
    "irq_min": pl.Int64,
    "irq_avg": pl.Int64,
    "irq_max": pl.Int64,
    "thread_count": pl.Int64,
    "thread_cur": pl.Int64,
    "thread_min": pl.Int64,
    "thread_avg": pl.Int64,
    "thread_max": pl.Int64,
}


def _group_columns(prefix: str, record: ContextStats) -> Dict[str, Optional[int]]:
    if not record.count:
        return {
            f"{prefix}_count": 0,
            f"{prefix}_cur": None,
            f"{prefix}_min": None,
            f"{prefix}_avg": None,
            f"{prefix}_max": None,
        }
    return {
        f"{prefix}_count": record.count,
        f"{prefix}_cur": record.cur,
        f"{prefix}_min": record.min,
        f"{prefix}_avg": record.avg,
        f"{prefix}_max": record.max,
    }


def summary_rows(store: StatsStore, monitored_cpus: Optional[Set[int]] = None) -> List[Dict[str, Any]]:
    rows = []
    for cpu, stats in store.items():
        if monitored_cpus is not None and cpu not in monitored_cpus:
            continue
        if not stats.has_samples:
            continue
        row: Dict[str, Any] = {"cpu": cpu}
        row.update(_group_columns("irq", stats.irq))
        row.update(_group_columns("thread", stats.thread))
        rows.append(row)
    return rows


def summary_dataframe(store: StatsStore, monitored_cpus: Optional[Set[int]] = None) -> pl.DataFrame:
    return pl.DataFrame(summary_rows(store, monitored_cpus), schema=SUMMARY_SCHEMA)


def export_summary(
    store: StatsStore,
    storage_config: StorageConfig,
    monitored_cpus: Optional[Set[int]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Optional[Path]:
    """
    Write the summary to storage_config.summary_output.

    Returns:
        The written path, or None when no output is configured.
    """
    destination = storage_config.summary_output
    if destination is None:
        return None

    storage = create_storage(storage_config.format, storage_config.compression)
    if storage_config.format == "json":
        document = dict(metadata or {})
        document["cpus"] = summary_rows(store, monitored_cpus)
        storage.save_document(document, Path(destination))
    else:
        storage.save_table(summary_dataframe(store, monitored_cpus), Path(destination))

    logger.info(f"Latency summary saved to {destination}")
    return Path(destination)
