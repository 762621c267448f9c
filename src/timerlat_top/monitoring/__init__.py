"""
Latency statistics aggregation and rendering.
"""

from .aggregator import Aggregator, apply
from .renderer import CLEAR_SCREEN, format_duration, render, render_header, render_row

__all__ = [
    "Aggregator",
    "apply",
    "CLEAR_SCREEN",
    "format_duration",
    "render",
    "render_header",
    "render_row",
]
