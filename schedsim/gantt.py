from __future__ import annotations

from typing import List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimelineEvent

COLORS = ["blue", "magenta", "green", "red", "dark_orange", "yellow", "deep_pink2", "slate_blue1", "cyan", "orchid"]
IDLE_STYLE = "on grey50"


def pid_color(pid: int) -> str:
    return COLORS[(pid - 1) % len(COLORS)]


def _time_marks(events: List[TimelineEvent]) -> str:
    marks = "0"
    for ev in events:
        marks += f"{ev.end_time:>{max(3, ev.duration)}}"
    return marks


def render_gantt(events: List[TimelineEvent]) -> str:
    """
    Plain-text Gantt chart renderer for terminals without color.
    """
    if not events:
        return "(no execution)"

    line = "|"
    labels = ""
    for ev in events:
        width = max(3, ev.duration)
        line += ("." if ev.is_idle else "=") * width
        labels += ev.label[:width].ljust(width)
    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            " " + labels,
            _time_marks(events),
        ]
    )


def build_rich_gantt(events: List[TimelineEvent]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not events:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    timeline = Text()
    labels = Text()

    for ev in events:
        width = max(3, ev.duration)
        if ev.is_idle:
            timeline.append(" " * width, style=IDLE_STYLE)
            labels.append(ev.label[:width].ljust(width), style="italic dim")
        else:
            timeline.append(" " * width, style=f"on {pid_color(ev.pid)}")
            labels.append(ev.label[:width].ljust(width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, _time_marks(events)
