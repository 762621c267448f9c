"""
Textual rendering of the per-CPU latency table.

The output mirrors the classic timerlat top layout: a header with the elapsed
run time and unit, a column label line and one row per CPU that has samples.
"""

from typing import List, Optional, Set

from ..models.stats import ContextStats, StatsStore

CLEAR_SCREEN = "\033c"
_HEADER_STYLE = "\033[2;37;40m"
_LABEL_STYLE = "\033[2;30;47m"
_RESET_STYLE = "\033[0;0;0m"

_PLACEHOLDER = "-"
_COLUMN_LABELS = (
    "CPU COUNT      |      cur       min       avg       max"
    " |      cur       min       avg       max"
)


def format_duration(elapsed_seconds: float) -> str:
    """Format elapsed seconds as "DDD HH:MM:SS" (days padded to three columns)."""
    total = max(int(elapsed_seconds), 0)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{days:3d} {hours:02d}:{minutes:02d}:{seconds:02d}"


def unit_label(divisor: int) -> str:
    return "ns" if divisor == 1 else "us"


def render_header(divisor: int, elapsed_seconds: float = 0.0, color: bool = True) -> List[str]:
    """Return the two header lines: title with elapsed time, then column labels."""
    unit = unit_label(divisor)
    title = (
        f"{format_duration(elapsed_seconds):<6}   |"
        f"          IRQ Timer Latency ({unit})        |"
        f"         Thread Timer Latency ({unit})"
    )
    if color:
        return [
            f"{_HEADER_STYLE}{title}{_RESET_STYLE}",
            f"{_LABEL_STYLE}{_COLUMN_LABELS}{_RESET_STYLE}",
        ]
    return [title, _COLUMN_LABELS]


def _render_group(record: ContextStats, divisor: int) -> List[str]:
    if not record.count:
        return [_PLACEHOLDER] * 4
    return [
        str(record.cur // divisor),
        str(record.min // divisor),
        str(record.avg // divisor),
        str(record.max // divisor),
    ]


def render_row(cpu: int, irq: ContextStats, thread: ContextStats, divisor: int) -> str:
    """Render one CPU row; the thread group ends the line."""
    irq_values = _render_group(irq, divisor)
    thread_values = _render_group(thread, divisor)
    return (
        f"{cpu:3d} #{irq.count:<9d} |"
        + " ".join(f"{value:>9}" for value in irq_values)
        + " |"
        + " ".join(f"{value:>9}" for value in thread_values)
    )


def render(
    store: StatsStore,
    divisor: int,
    quiet: bool,
    monitored_cpus: Optional[Set[int]] = None,
    elapsed_seconds: float = 0.0,
    clear_screen: bool = True,
    color: bool = True,
) -> str:
    """Render a snapshot of the store as text.

    Args:
        store: Statistics to render; never modified.
        divisor: Scale applied to nanosecond values (1 = ns, 1000 = us).
            Zero renders nothing.
        quiet: Suppresses the screen-clear directive.
        monitored_cpus: CPUs to consider; None means all of them.
        elapsed_seconds: Run time shown in the header.
        clear_screen: Allows the screen-clear directive when not quiet.
        color: Wraps header lines in terminal styling.

    Returns:
        The snapshot, newline terminated, or "" for a zero divisor.
    """
    if divisor <= 0:
        return ""

    lines = render_header(divisor, elapsed_seconds, color=color)
    for cpu, stats in store.items():
        if monitored_cpus is not None and cpu not in monitored_cpus:
            continue
        # No samples at all: the CPU is offline or has not fired yet.
        if not stats.has_samples:
            continue
        lines.append(render_row(cpu, stats.irq, stats.thread, divisor))

    text = "\n".join(lines) + "\n"
    if not quiet and clear_screen:
        text = CLEAR_SCREEN + text
    return text
