from __future__ import annotations

from typing import Iterable, List

from .models import TimelineEvent


def consolidate(events: Iterable[TimelineEvent]) -> List[TimelineEvent]:
    """
    Merge chronologically adjacent events that share the same pid (or are
    both idle) into a single span.

    The input events are left untouched; running this on an already
    consolidated timeline returns an equal timeline.
    """
    merged: List[TimelineEvent] = []
    for event in events:
        if merged and merged[-1].pid == event.pid:
            merged[-1].end_time = event.end_time
        else:
            merged.append(TimelineEvent(pid=event.pid, start_time=event.start_time, end_time=event.end_time))
    return merged


def busy_time(events: Iterable[TimelineEvent]) -> int:
    return sum(e.duration for e in events if not e.is_idle)
