"""
CPU discovery utilities.

This module sizes the per-CPU statistics table and turns CPU list strings
into the set of CPUs shown in the output.
"""

import logging
import os
from typing import Optional, Set

import psutil

from ..validation import parse_cpu_list

logger = logging.getLogger(__name__)


def get_configured_cpu_count() -> int:
    """Return the number of configured logical CPUs.

    CPU ids reported by the tracer range over configured CPUs, including
    offline ones, so the larger of psutil's logical count and
    SC_NPROCESSORS_CONF is used.

    Raises:
        RuntimeError: If no source reports a CPU count.
    """
    counts = [psutil.cpu_count(logical=True) or 0]
    try:
        counts.append(os.sysconf("SC_NPROCESSORS_CONF"))
    except (ValueError, OSError, AttributeError):
        counts.append(os.cpu_count() or 0)
    count = max(counts)
    if count <= 0:
        raise RuntimeError("Unable to determine the number of CPUs")
    logger.debug(f"Configured CPU count: {count}")
    return count


def resolve_monitored_cpus(cpu_list: str, nr_cpus: int) -> Optional[Set[int]]:
    """Resolve a CPU list string into the set of CPUs to render.

    Args:
        cpu_list: CPU list such as "0-3,5"; empty means all CPUs.
        nr_cpus: Number of CPUs in the statistics table.

    Returns:
        The selected CPU ids, or None when every CPU is monitored.

    Raises:
        ValidationError: If the list is malformed.
        ValueError: If it names a CPU outside 0..nr_cpus-1.
    """
    if not cpu_list:
        return None
    cpus = parse_cpu_list(cpu_list)
    out_of_range = sorted(cpu for cpu in cpus if cpu >= nr_cpus)
    if out_of_range:
        raise ValueError(
            f"CPU list '{cpu_list}' names CPUs {format_cpu_set(set(out_of_range))} "
            f"but only {nr_cpus} CPUs are configured"
        )
    return cpus


def format_cpu_set(cores: Set[int]) -> str:
    """Format a set of CPU ids into a compact list string.

    Examples:
        >>> format_cpu_set({0, 2, 3, 4})
        '0,2-4'
        >>> format_cpu_set(set())
        ''
    """
    if not cores:
        return ""

    sorted_cores = sorted(cores)
    ranges = []
    start = end = sorted_cores[0]

    for core in sorted_cores[1:]:
        if core == end + 1:
            end = core
        else:
            ranges.append(str(start) if start == end else f"{start}-{end}")
            start = end = core
    ranges.append(str(start) if start == end else f"{start}-{end}")

    return ",".join(ranges)
