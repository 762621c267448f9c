#!/usr/bin/env python3
"""
Latency summary viewer.

This tool prints a summary exported by ``timerlat-top --summary`` (Parquet or
JSON) as the same per-CPU table the monitor shows at the end of a run.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from timerlat_top.models import TIME_UNIT_DIVISORS, ContextStats, StatsStore
from timerlat_top.monitoring import render
from timerlat_top.storage import JsonStorage, ParquetStorage, create_storage

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def load_summary_rows(path: Path) -> List[Dict[str, Any]]:
    """
    Load the per-CPU rows of a summary file.

    The format is taken from the suffix: ``.json`` files hold a document with
    a ``cpus`` list, ``.parquet`` files hold the table itself.

    Raises:
        ValueError: If the suffix is unknown or a JSON document has no ``cpus`` list.
    """
    if path.suffix == JsonStorage.suffix:
        document = create_storage("json").load_document(path)
        rows = document.get("cpus")
        if not isinstance(rows, list):
            raise ValueError(f"{path} has no 'cpus' list")
        return rows
    if path.suffix == ParquetStorage.suffix:
        return create_storage("parquet").load_table(path).to_dicts()
    raise ValueError(
        f"{path} is neither {JsonStorage.suffix} nor {ParquetStorage.suffix}"
    )


def _restore_group(record: ContextStats, row: Dict[str, Any], prefix: str) -> None:
    count = row.get(f"{prefix}_count") or 0
    if not count:
        return
    record.count = count
    record.cur = row[f"{prefix}_cur"]
    record.min = row[f"{prefix}_min"]
    # The truncated average survives the round trip: (avg * count) // count == avg.
    record.sum = row[f"{prefix}_avg"] * count
    record.max = row[f"{prefix}_max"]


def rows_to_store(rows: List[Dict[str, Any]]) -> Optional[StatsStore]:
    """Rebuild a statistics table from summary rows, or None when there are none."""
    if not rows:
        return None
    store = StatsStore(max(row["cpu"] for row in rows) + 1)
    for row in rows:
        stats = store[row["cpu"]]
        _restore_group(stats.irq, row, "irq")
        _restore_group(stats.thread, row, "thread")
    return store


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the summary viewer.

    Exit codes:
        0: Summary printed
        1: File missing, unreadable or empty

    Examples:
        python tools/show_summary.py summary.parquet
        python tools/show_summary.py summary.json --nano
    """
    parser = argparse.ArgumentParser(description="Print an exported timerlat-top latency summary")
    parser.add_argument("summary", help="Summary file written by timerlat-top --summary")
    parser.add_argument("-n", "--nano", action="store_true", help="display data in nanoseconds")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    path = Path(args.summary)
    if not path.exists():
        logger.error(f"Summary file does not exist: {path}")
        return 1

    try:
        store = rows_to_store(load_summary_rows(path))
    except Exception as e:
        logger.error(f"Failed to read summary {path}: {e}")
        return 1

    if store is None:
        logger.warning(f"No CPU recorded a sample in {path}")
        return 1

    divisor = TIME_UNIT_DIVISORS["ns" if args.nano else "us"]
    sys.stdout.write(render(store, divisor, quiet=True, color=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
