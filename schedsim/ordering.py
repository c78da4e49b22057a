"""
Ordering keys shared by every scheduling algorithm.

Whenever an algorithm's primary key ties, the tie is broken by earlier
arrival and then by lower pid, so identical inputs always produce the
same schedule.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple, TypeVar

from .models import Process, WorkingProcess

P = TypeVar("P", Process, WorkingProcess)


def tie_break_key(p: Process | WorkingProcess) -> Tuple[int, int]:
    return (p.arrival_time, p.pid)


def shortest_burst_key(p: Process | WorkingProcess) -> Tuple[int, int, int]:
    return (p.burst_time,) + tie_break_key(p)


def shortest_remaining_key(p: WorkingProcess) -> Tuple[int, int, int]:
    return (p.remaining_time,) + tie_break_key(p)


def by_arrival(processes: Iterable[P]) -> List[P]:
    """Return the processes in admission order (arrival, then pid)."""
    return sorted(processes, key=tie_break_key)
