"""
System interaction utilities.

CPU discovery used to size the statistics table and to resolve the CPU
subset selected on the command line or in the configuration.
"""

from .cpu import format_cpu_set, get_configured_cpu_count, resolve_monitored_cpus

__all__ = [
    "format_cpu_set",
    "get_configured_cpu_count",
    "resolve_monitored_cpus",
]
