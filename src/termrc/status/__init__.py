"""Status line probe and formatter."""

from .formatter import BatteryReading, StatusLine, StatusSegment, render
from .probe import DEFAULT_STATS_COMMAND, ProcessResult, collect_process_stats

__all__ = [
    "BatteryReading",
    "collect_process_stats",
    "DEFAULT_STATS_COMMAND",
    "ProcessResult",
    "render",
    "StatusLine",
    "StatusSegment",
]
