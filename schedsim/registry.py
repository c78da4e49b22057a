from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Set, Tuple

from .models import Process

logger = logging.getLogger(__name__)

# (arrival_time, burst_time) of the built-in demo workload.
SAMPLE_WORKLOAD: List[Tuple[int, int]] = [(0, 8), (1, 4), (2, 9), (3, 5)]


class ProcessRegistry:
    """
    The user-defined process set, plus the counter that hands out pids.

    Processes are frozen once created; the scheduling engine only ever
    receives a ``snapshot()`` of them.
    """

    def __init__(self) -> None:
        self._processes: List[Process] = []
        self._next_pid = 1
        self._reserved: Set[int] = set()

    def __len__(self) -> int:
        return len(self._processes)

    def __iter__(self) -> Iterator[Process]:
        return iter(self._processes)

    @property
    def next_pid(self) -> int:
        return self._next_pid

    def add(self, arrival_time: int, burst_time: int) -> Process:
        # Process validates itself; the counter only advances on success.
        process = Process(pid=self._next_pid, arrival_time=arrival_time, burst_time=burst_time)
        self._processes.append(process)
        self._next_pid += 1
        self._skip_reserved()
        logger.debug("Registered %s (arrival=%d, burst=%d)", process.label, arrival_time, burst_time)
        return process

    def reserve(self, pids: Iterable[int]) -> None:
        """Keep pids that were assigned elsewhere out of the counter's sequence."""
        self._reserved.update(pids)
        self._skip_reserved()

    def _skip_reserved(self) -> None:
        while self._next_pid in self._reserved:
            self._next_pid += 1

    def add_samples(self) -> List[Process]:
        return [self.add(arrival, burst) for arrival, burst in SAMPLE_WORKLOAD]

    def reset(self) -> None:
        self._processes.clear()
        self._next_pid = 1
        self._reserved.clear()

    def snapshot(self) -> List[Process]:
        return list(self._processes)
