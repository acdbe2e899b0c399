from __future__ import annotations

import re
import zlib
from typing import List, Optional, Sequence, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionInterval

PROCESS_COLORS = [
    "#EF4444", "#F97316", "#F59E0B", "#EAB308",
    "#84CC16", "#22C55E", "#10B981", "#14B8A6",
    "#06B6D4", "#0EA5E9", "#3B82F6", "#6366F1",
    "#8B5CF6", "#A855F7", "#D946EF", "#EC4899",
]

_DIGITS = re.compile(r"(\d+)")


def process_color(pid: str) -> str:
    """
    Display colour for a process, stable across runs.

    The first number in the id picks the palette slot (P1 -> first colour);
    ids without digits are hashed.
    """
    match = _DIGITS.search(pid)
    if match:
        index = int(match.group(1)) - 1
    else:
        index = zlib.crc32(pid.encode("utf-8"))
    return PROCESS_COLORS[index % len(PROCESS_COLORS)]


def _segments(intervals: Sequence[ExecutionInterval]) -> Tuple[List[Tuple[Optional[str], int]], str]:
    """
    Walk the timeline in start order.

    Returns ``(pid, width)`` blocks, where a ``None`` pid is idle time,
    together with the time-mark line that goes under the chart.
    """
    blocks: List[Tuple[Optional[str], int]] = []
    time_marks = "0"
    last_time = 0

    for iv in sorted(intervals, key=lambda iv: (iv.start_time, iv.end_time)):
        if iv.start_time > last_time:
            blocks.append((None, iv.start_time - last_time))
            time_marks += f"{iv.start_time:>3}"
        blocks.append((iv.pid, max(1, iv.duration)))
        last_time = iv.end_time
        time_marks += f"{last_time:>3}"

    return blocks, time_marks


def render_gantt(intervals: Sequence[ExecutionInterval]) -> str:
    """
    Plain-text Gantt chart; idle gaps are drawn as dots.
    """
    if not intervals:
        return "(no execution)"

    blocks, time_marks = _segments(intervals)
    line = "|" + "".join("." * w if pid is None else "=" * w for pid, w in blocks) + "|"
    labels = " " + "".join(" " * w if pid is None else pid[:w].ljust(w) for pid, w in blocks)

    return "\n".join(["Gantt Chart:", line, labels, time_marks])


def build_rich_gantt(intervals: Sequence[ExecutionInterval]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not intervals:
        return Panel("No execution", title="Gantt Chart"), ""

    blocks, time_marks = _segments(intervals)
    timeline = Text()
    labels = Text()
    for pid, width in blocks:
        if pid is None:
            timeline.append(" " * width)
            labels.append(" " * width)
        else:
            timeline.append(" " * width, style=f"on {process_color(pid)}")
            labels.append(pid[:width].ljust(width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), time_marks
