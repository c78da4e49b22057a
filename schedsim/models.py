from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import InvalidInput


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int

    def __post_init__(self) -> None:
        if isinstance(self.pid, bool) or not isinstance(self.pid, int) or self.pid <= 0:
            raise InvalidInput(f"Process id must be a positive integer, got {self.pid!r}")
        if isinstance(self.arrival_time, bool) or not isinstance(self.arrival_time, int) or self.arrival_time < 0:
            raise InvalidInput(f"P{self.pid}: arrival time must be an integer >= 0, got {self.arrival_time!r}")
        if isinstance(self.burst_time, bool) or not isinstance(self.burst_time, int) or self.burst_time <= 0:
            raise InvalidInput(f"P{self.pid}: burst time must be greater than 0, got {self.burst_time!r}")

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class TimelineEvent:
    """
    One contiguous span of the Gantt chart.

    ``pid`` is None for an idle span.
    """

    pid: Optional[int]
    start_time: int
    end_time: int

    @property
    def is_idle(self) -> bool:
        return self.pid is None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def label(self) -> str:
        return "Idle" if self.pid is None else f"P{self.pid}"


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    completion_time: int
    turnaround_time: int
    waiting_time: int


@dataclass
class WorkingProcess:
    """
    Per-run mutable copy of a Process.

    Completion fields are written exactly once, by ``finish``.
    """

    pid: int
    arrival_time: int
    burst_time: int
    remaining_time: int
    completion_time: Optional[int] = None

    @classmethod
    def from_process(cls, process: Process) -> "WorkingProcess":
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            remaining_time=process.burst_time,
        )

    @property
    def done(self) -> bool:
        return self.completion_time is not None

    def run_for(self, amount: int) -> None:
        if amount <= 0 or amount > self.remaining_time:
            raise RuntimeError(f"P{self.pid}: cannot run {amount} with {self.remaining_time} remaining")
        self.remaining_time -= amount

    def finish(self, time: int) -> ProcessMetrics:
        if self.completion_time is not None:
            raise RuntimeError(f"P{self.pid} already completed at {self.completion_time}")
        self.remaining_time = 0
        self.completion_time = time
        turnaround_time = time - self.arrival_time
        return ProcessMetrics(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            completion_time=time,
            turnaround_time=turnaround_time,
            waiting_time=turnaround_time - self.burst_time,
        )


@dataclass
class SystemMetrics:
    avg_waiting_time: float
    avg_turnaround_time: float
    makespan: int
    cpu_busy_time: int
    idle_time: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[TimelineEvent] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
