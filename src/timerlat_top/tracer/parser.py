"""
Parser for timerlat events in the textual trace format.

A timerlat event line looks like:

    <idle>-0     [001] d.h1.   563.484341: #1 context    irq timer_latency      2096 ns
    timerlat/1-1006  [001] .......   563.484356: #1 context thread timer_latency     11380 ns

Only the CPU, the context and the latency are kept. Anything else in the
buffer (stack traces, other events, comments) is skipped.
"""

import re
from typing import Iterable, Iterator, Optional

from ..models.stats import Sample

TIMERLAT_EVENT_RE = re.compile(
    r"(?:^|\s)\[(?P<cpu>\d+)\]\s"
    r".*?#\d+\s+context\s+(?P<context>[\w-]+)\s+"
    r"timer_latency\s+(?P<latency>\d+)\s+ns"
)


def parse_timerlat_line(line: str) -> Optional[Sample]:
    """Parse one trace line into a Sample, or None if it is not a timerlat event.

    Any context other than "irq" is a thread-context latency.
    """
    match = TIMERLAT_EVENT_RE.search(line)
    if match is None:
        return None
    return Sample(
        cpu=int(match.group("cpu")),
        is_thread_context=match.group("context") != "irq",
        latency=int(match.group("latency")),
    )


def parse_timerlat_lines(lines: Iterable[str]) -> Iterator[Sample]:
    for line in lines:
        sample = parse_timerlat_line(line)
        if sample is not None:
            yield sample
